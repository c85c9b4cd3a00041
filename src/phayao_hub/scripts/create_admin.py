"""Create an admin account, or promote and reset an existing one."""
from __future__ import annotations

import argparse
import getpass
import sys

from sqlalchemy import or_
from sqlalchemy.orm import Session

from phayao_hub.core.security import hash_password
from phayao_hub.db.session import SessionLocal, create_tables
from phayao_hub.models import User
from phayao_hub.models.user import ROLE_ADMIN, STATUS_ACTIVE


def create_or_reset_admin(
    db: Session,
    username: str,
    email: str,
    password: str,
    full_name: str | None = None,
) -> tuple[User, bool]:
    """Ensure `username` exists as an active admin with the given password.

    Returns:
        The user row and whether it was newly created.
    """
    user = (
        db.query(User)
        .filter(or_(User.username == username, User.email == email))
        .first()
    )
    created = user is None
    if user is None:
        user = User(username=username, email=email)
        db.add(user)

    user.password_hash = hash_password(password)
    user.role = ROLE_ADMIN
    user.status = STATUS_ACTIVE
    if full_name:
        user.full_name = full_name
    db.commit()
    db.refresh(user)
    return user, created


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create or reset a Phayao Hub admin account")
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument(
        "--password",
        default=None,
        help="Password to set (prompted for when omitted)",
    )
    parser.add_argument("--full-name", default=None)
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before touching the users table.",
    )
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Admin password: ")
    if len(password) < 6:
        print("[create_admin] ERROR: password must be at least 6 characters", file=sys.stderr)
        sys.exit(1)

    if args.create_tables:
        create_tables()

    db = SessionLocal()
    try:
        user, created = create_or_reset_admin(
            db, args.username, args.email, password, args.full_name
        )
    except Exception as exc:
        print(f"[create_admin] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()

    action = "created" if created else "updated"
    print(f"[create_admin] {action} admin {user.username} (id={user.id})")


if __name__ == "__main__":
    main()
