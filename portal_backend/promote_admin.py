"""Grant the admin role to an existing user.

Usage:
    python -m portal_backend.promote_admin user@example.com
"""
import argparse
import sys

from portal_backend.database import SessionLocal, initialize_database
from portal_backend.models.user import ROLE_ADMIN
from portal_backend.repositories.users import UserStore


def promote(email: str) -> bool:
    db = SessionLocal()
    try:
        store = UserStore(db)
        user = store.get_by_email(email)
        if user is None:
            return False
        user.role = ROLE_ADMIN
        store.save(user)
        return True
    finally:
        db.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Grant the admin role to an existing user.")
    parser.add_argument("email")
    args = parser.parse_args(argv)

    initialize_database()
    if not promote(args.email.strip()):
        print(f"No user with email {args.email}", file=sys.stderr)
        sys.exit(1)
    print(f"{args.email} is now an admin")


if __name__ == "__main__":
    main()
