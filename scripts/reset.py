#!/usr/bin/env python3
"""
Delete all data of a single owner (habits, completion history, focus sessions), keeping the profile.

Env:
  MONGO_URI   (required)
  DB_NAME     (default: habit_tracker)
  USER_ID     (default: demo)
  DRY_RUN     (default: true)  -> set to "false" to actually delete
"""
import os
from datetime import datetime, timezone

import certifi
from pymongo import MongoClient

MONGO_URI = os.environ.get("MONGO_URI", "")
DB_NAME = os.environ.get("DB_NAME", "habit_tracker")
USER_ID = os.getenv("USER_ID", "demo")
DRY_RUN = (os.getenv("DRY_RUN", "true").lower() != "false")

COLLECTIONS = ["tasks", "habit_logs", "focus_sessions"]


def count_all(db):
    return {c: db[c].count_documents({"user": USER_ID}) for c in COLLECTIONS}

def main():
    if not MONGO_URI:
        raise SystemExit("MONGO_URI is required")
    kwargs = {"serverSelectionTimeoutMS": 8000}
    if MONGO_URI.startswith("mongodb+srv://"):
        kwargs["tlsCAFile"] = certifi.where()
    client = MongoClient(MONGO_URI, **kwargs)
    client.admin.command("ping")
    db = client[DB_NAME]

    print(f"[cfg] DB={DB_NAME} USER={USER_ID} DRY_RUN={DRY_RUN}")
    print("\n[before] per-collection owner-doc counts")
    for c, n in count_all(db).items():
        print(f"  {c:14} : {n}")

    if DRY_RUN:
        print("\n[dry-run] No deletes performed. Set DRY_RUN=false to apply.")
    else:
        total_deleted = 0
        for c in COLLECTIONS:
            res = db[c].delete_many({"user": USER_ID})
            print(f"[deleted] {c:14} : {res.deleted_count}")
            total_deleted += res.deleted_count
        db.user_profiles.update_one({"_id": USER_ID}, {"$set": {"streak": 0, "max_streak": 0}})
        print(f"\n[done] Total deleted: {total_deleted} docs @ {datetime.now(timezone.utc).isoformat()}")

        print("\n[after] per-collection owner-doc counts")
        for c, n in count_all(db).items():
            print(f"  {c:14} : {n}")
    client.close()


if __name__ == "__main__":
    main()
