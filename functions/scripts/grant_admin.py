"""
Grant (or revoke) admin access for an existing NutriWise user.

The user is looked up by e-mail in the configured DB backend and their
`isAdmin` flag is updated.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.db import DbClient, InMemoryDbClient
from backend.dependencies import get_db_client


logger = logging.getLogger(__name__)


def set_admin(db: DbClient, email: str, is_admin: bool = True, dry_run: bool = False) -> bool:
    """Returns False if no user has the given e-mail."""
    found = db.find_user_by_email(email)
    if not found:
        logger.error("No user found with email: %s", email)
        return False

    uid, user = found
    if bool(user.get("is_admin")) == is_admin:
        logger.info("%s (%s) already has is_admin=%s", email, uid, is_admin)
        return True
    if dry_run:
        logger.info("Would set is_admin=%s for %s (%s)", is_admin, email, uid)
        return True

    db.update_user(uid, {"is_admin": is_admin})
    logger.info("Set is_admin=%s for %s (%s)", is_admin, email, uid)
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email", help="E-mail address of the user")
    parser.add_argument(
        "--revoke",
        action="store_true",
        help="Remove admin access instead of granting it",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the change without saving it",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    db = get_db_client()
    if isinstance(db, InMemoryDbClient):
        logger.error(
            "No Firestore backend configured (set FIREBASE_PROJECT_ID and unset "
            "NUTRIWISE_USE_IN_MEMORY_BACKENDS); refusing to edit the in-memory store."
        )
        return 2
    logger.info("Using Firestore backend")
    ok = set_admin(db, args.email, is_admin=not args.revoke, dry_run=args.dry_run)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
