"""Issue a bearer token for a user id (local development and operations).

Usage:
    python -m taskhub.scripts.issue_token --user-id user_2abc --hours 8
    python -m taskhub.scripts.issue_token --user-id user_2abc --provision
"""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta

from taskhub.config import get_settings
from taskhub.db.session import SessionLocal
from taskhub.services.auth import create_access_token
from taskhub.services.workspace_service import get_or_create_personal


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Issue a TaskHub bearer token")
    parser.add_argument("--user-id", required=True, help="Caller id placed in the token's sub claim")
    parser.add_argument(
        "--hours",
        type=int,
        default=None,
        help="Token lifetime in hours (default: ACCESS_TOKEN_EXPIRE_HOURS)",
    )
    parser.add_argument(
        "--provision",
        action="store_true",
        help="Also create the user's personal workspace if it does not exist",
    )
    args = parser.parse_args(argv)

    user_id = args.user_id.strip()
    if not user_id:
        print("--user-id must not be blank.", file=sys.stderr)
        return 1
    if not get_settings().secret_key:
        print("SECRET_KEY is not set; refusing to issue an unverifiable token.", file=sys.stderr)
        return 1

    if args.provision:
        db = SessionLocal()
        try:
            workspace = get_or_create_personal(db, user_id)
            print(f"Personal workspace ready: {workspace.id}", file=sys.stderr)
        finally:
            db.close()

    expires = timedelta(hours=args.hours) if args.hours else None
    print(create_access_token(user_id, expires_delta=expires))
    return 0


if __name__ == "__main__":
    sys.exit(main())
