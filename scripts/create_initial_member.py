"""Utility script to create an initial administrator member in the database."""

from __future__ import annotations

import argparse
import uuid

from sqlalchemy.exc import SQLAlchemyError

from app.domain.entities import Member, MemberRole
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.repositories import MemberRepository
from app.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for member creation."""

    parser = argparse.ArgumentParser(
        description="Create an initial member for the congregation portal.",
    )
    parser.add_argument("--first-name", default="Portal", help="First name (default: Portal)")
    parser.add_argument("--last-name", default="Admin", help="Last name (default: Admin)")
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="Email address of the member (default: admin@example.com)",
    )
    parser.add_argument(
        "--role",
        choices=[role.value for role in MemberRole],
        default=MemberRole.ADMIN.value,
        help="Role granted to the member (default: ADMIN)",
    )
    parser.add_argument(
        "--no-email-notifications",
        action="store_true",
        help="Opt the member out of urgent announcement emails.",
    )
    return parser.parse_args()


def main() -> None:
    """Create a member using the provided command line arguments."""

    args = parse_args()

    initialize_database()

    session = SessionLocal()
    try:
        member = MemberRepository(session).create(
            Member(
                id=str(uuid.uuid4()),
                email=args.email,
                first_name=args.first_name,
                last_name=args.last_name,
                role=MemberRole(args.role),
                email_notifications=not args.no_email_notifications,
            )
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the member: {exc}") from exc
    else:
        token = create_access_token({"sub": member.id})
        print(
            "Member created:\n"
            f"  ID: {member.id}\n"
            f"  Name: {member.full_name}\n"
            f"  Email: {member.email}\n"
            f"  Role: {member.role.value}\n"
            f"  Bearer token: {token}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
