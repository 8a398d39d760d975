"""CLI tool for admin operations.

Usage:
    python -m tradejournal.cli create-user
    python -m tradejournal.cli token <username>
"""

import sys
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlmodel import Session, select

from tradejournal.config import settings
from tradejournal.database import engine, create_db_and_tables
from tradejournal.models.user import User
from tradejournal.services.auth import create_access_token
from tradejournal.utils.logging import setup_logging


def create_user():
    """Create a journal user and print a bearer token for it."""
    create_db_and_tables()

    username = input("Username: ").strip()
    if not username:
        print("Username cannot be empty.")
        sys.exit(1)

    with Session(engine) as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            print(f"User '{username}' already exists.")
            sys.exit(1)

    email = input("Email (optional): ").strip()
    tz_name = input(f"Timezone [{settings.default_timezone}]: ").strip() or settings.default_timezone
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        print(f"Unknown timezone '{tz_name}'.")
        sys.exit(1)
    currency = input("Base currency [USD]: ").strip().upper() or "USD"

    user = User(username=username, email=email, timezone=tz_name, base_currency=currency)

    with Session(engine) as session:
        session.add(user)
        session.commit()

    print(f"\nUser '{username}' created successfully.")
    print(f"\nAccess token: {create_access_token(subject=username)}")


def issue_token(username: str):
    """Print a fresh bearer token for an existing user."""
    create_db_and_tables()
    with Session(engine) as session:
        user = session.exec(select(User).where(User.username == username)).first()
    if user is None or not user.is_active:
        print(f"User '{username}' not found or inactive.")
        sys.exit(1)
    print(create_access_token(subject=username))


def main():
    setup_logging("WARNING")
    if len(sys.argv) < 2:
        print("Usage: python -m tradejournal.cli <command>")
        print("Commands: create-user, token <username>")
        sys.exit(1)

    command = sys.argv[1]
    if command == "create-user":
        create_user()
    elif command == "token" and len(sys.argv) == 3:
        issue_token(sys.argv[2])
    else:
        print(f"Unknown command: {' '.join(sys.argv[1:])}")
        sys.exit(1)


if __name__ == "__main__":
    main()
