"""
Create a user, e.g. the first admin (registration only ever creates 'User'). Run from project root:
  python -m campus_connect.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m campus_connect.scripts.create_user admin admin@campus.edu your-secure-password Admin
"""
import argparse
import logging
import sys

from sqlalchemy import or_

from campus_connect.core.database import SessionLocal
from campus_connect.core.security import hash_password
from campus_connect.models.user import ROLES, ROLE_USER, User

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Campus Connect user.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(ROLES))
    args = parser.parse_args(argv)

    username = args.username.strip()
    email = args.email.strip().lower()
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if "@" not in email or len(email) > 255:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if len(args.password) < 8 or len(args.password) > 128:
        print("Password must be 8-128 characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        existing = (
            db.query(User)
            .filter(or_(User.username == username, User.email == email))
            .first()
        )
        if existing:
            print(f"User '{username}' or email '{email}' already exists.", file=sys.stderr)
            return 1
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(args.password),
            role=args.role,
        )
        db.add(user)
        db.commit()
        logger.info("Created user '%s' with role '%s'.", username, args.role)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
