"""
CLI helper to create a back-office account.

Useful when the bootstrap endpoint is closed because admins already exist.
"""
import argparse
import getpass
import sys
from pathlib import Path

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError

from src.estatesite.api.auth import get_password_hash
from src.estatesite.api.schemas import AdminCreate
from src.estatesite.db.models import AdminRole
from src.estatesite.db.repository import AdminRepository
from src.estatesite.db.session import get_db_session
from src.estatesite.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an admin account.")
    parser.add_argument("--name", required=True, help="Display name.")
    parser.add_argument("--email", required=True, help="Login e-mail.")
    parser.add_argument(
        "--role",
        choices=[role.value for role in AdminRole],
        default=AdminRole.SUPER_ADMIN.value,
        help="Account role (default: super-admin).",
    )
    parser.add_argument("--password", help="Password; prompted for when omitted.")
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging()

    password = args.password or getpass.getpass("Password: ")

    try:
        payload = AdminCreate(name=args.name, email=args.email, password=password, role=args.role)
    except ValidationError as e:
        print(f"Invalid admin details:\n{e}")
        sys.exit(1)

    repository = AdminRepository()

    with get_db_session() as session:
        if repository.get_by_email(session, payload.email) is not None:
            print(f"Admin {payload.email} already exists.")
            sys.exit(1)

        admin = repository.create(
            session,
            name=payload.name,
            email=payload.email,
            password_hash=get_password_hash(payload.password),
            role=payload.role,
            is_active=True,
        )
        logger.info("admin_created", id=admin.id, role=admin.role)
        print(f"\nCreated {admin.role} {admin.email} (id={admin.id})")


if __name__ == "__main__":
    main()
