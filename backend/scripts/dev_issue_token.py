"""Mint a development bearer token for a resident id.

Usage: python scripts/dev_issue_token.py <user-id> [minutes]
"""
from __future__ import annotations

import sys
from datetime import timedelta

from laundry_booking.core.security import create_access_token


def main(argv: list[str]) -> int:
    if not argv:
        print("usage: dev_issue_token.py <user-id> [minutes]", file=sys.stderr)
        return 2
    user_id = argv[0]
    minutes = int(argv[1]) if len(argv) > 1 else 60
    token = create_access_token(user_id, expires_delta=timedelta(minutes=minutes))
    print(token)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
