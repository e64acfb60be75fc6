"""
Seed script for CivicTrack admins and users (mock DB or Firestore).

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Force mock DB even if FIREBASE configured: python scripts/seed_db.py --apply --force-mock
  - Other seed file: python scripts/seed_db.py --seed ./my_seed.json

Seed file format:
  {
    "admins": [{"adminId": "admin", "password": "..."}],
    "users": [{"email": "a@x.com", "name": "Asha", "password": "..."}]
  }

Passwords in the seed file are hashed before they are written; admins are
only ever created here, never through the API.
"""

import argparse
import json
import os
from typing import Any, Dict

from app.core.settings import settings
from app.core.errors import ConflictError
from app.models.user import UserCreate


def load_seed(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_to_db(seed: Dict[str, Any], apply: bool = False) -> Dict[str, int]:
    from app.services.admin_service import get_admin_service
    from app.services.user_service import get_user_service

    written = {"admins": 0, "users": 0}

    for admin in seed.get("admins", []):
        print(f"Preparing: admins/{admin['adminId']}")
        if not apply:
            continue
        get_admin_service().provision_admin(admin["adminId"], admin["password"])
        written["admins"] += 1
        print(f"Wrote: admins/{admin['adminId']}")

    for user in seed.get("users", []):
        print(f"Preparing: users/{user['email']}")
        if not apply:
            continue
        try:
            get_user_service().create_user(UserCreate(**user))
            written["users"] += 1
            print(f"Wrote: users/{user['email']}")
        except ConflictError:
            print(f"Skipped existing user: {user['email']}")

    return written


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--force-mock", action="store_true", help="Force use of mock DB even if FIREBASE configured")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Path to the seed JSON file")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        print(f"Seed file not found: {args.seed}")
        return

    seed = load_seed(args.seed)

    if args.force_mock:
        print("Forcing mock DB usage for this run.")
        settings.USE_MOCK_DB = True

    written = write_to_db(seed, apply=args.apply)

    if args.apply:
        print(f"Seeding completed: {written['admins']} admin(s), {written['users']} user(s).")
    else:
        print("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
