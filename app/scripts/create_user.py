"""
Create a user (e.g. the first admin) or promote an existing one. Signup never
grants admin, so this is the way to bootstrap one. Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [--admin]
  python -m app.scripts.create_user --promote EMAIL
Example:
  python -m app.scripts.create_user "Site Admin" admin@example.com your-secure-password --admin
"""
import argparse
import sys

from pydantic import ValidationError

from app.core.database import SessionLocal
from app.core.errors import DuplicateEmail
from app.schemas.auth import SignupRequest
from app.services.credentials import CredentialStore


def promote(email: str) -> int:
    db = SessionLocal()
    try:
        store = CredentialStore(db)
        user = store.find_by_email(email)
        if user is None:
            print(f"No user with email '{email}'.", file=sys.stderr)
            return 1
        user = store.set_admin(user, True)
        print(f"Promoted user '{user.email}' (id={user.id}) to admin.")
        return 0
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Mystère Meal user or promote one to admin.")
    parser.add_argument("name", nargs="?", help="Display name")
    parser.add_argument("email", nargs="?", help="Email (login key)")
    parser.add_argument("password", nargs="?", help="Password (at most 72 bytes)")
    parser.add_argument("--admin", action="store_true", help="Grant admin privileges")
    parser.add_argument("--promote", metavar="EMAIL", help="Grant admin to an existing user")
    args = parser.parse_args(argv)

    if args.promote:
        if args.name or args.email or args.password:
            parser.error("--promote takes only an EMAIL")
        return promote(args.promote)
    if not (args.name and args.email and args.password):
        parser.error("NAME, EMAIL and PASSWORD are required")

    try:
        body = SignupRequest(name=args.name, email=args.email, password=args.password)
    except ValidationError as e:
        print(f"Invalid input: {e.errors()[0]['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = CredentialStore(db).create(body.name, body.email, body.password, is_admin=args.admin)
    except DuplicateEmail:
        print(f"User '{body.email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    role = "admin" if user.is_admin else "user"
    print(f"Created user '{user.email}' (id={user.id}) with role '{role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
