"""Create an admin account from the command line.

Usage:
    python scripts/create_admin.py --fullname "Jane Admin" --email admin@example.com --password secret
"""

import argparse
import logging
import os
import sys

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from pydantic import ValidationError

from app.common.errors import AppError
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.features.admins.schemas import AdminCreate
from app.features.admins.service import register_admin
import app.db.models  # noqa: F401

logger = logging.getLogger("scripts.create_admin")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Register an admin account")
    parser.add_argument("--fullname", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.create_tables:
        Base.metadata.create_all(bind=engine)

    try:
        data = AdminCreate(fullname=args.fullname, email=args.email, password=args.password)
    except ValidationError as exc:
        logger.error("Invalid input: %s", exc)
        return 2

    with SessionLocal() as db:
        try:
            admin = register_admin(db, data)
        except AppError as exc:
            logger.error(exc.message)
            return 1

    logger.info("Created admin %s <%s>", admin.fullname, admin.email)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
