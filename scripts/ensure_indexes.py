#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Index bootstrap for the habit tracker
Run:
  python -m scripts.ensure_indexes --uri "mongodb+srv://..." [--db habit_tracker] [--create]
"""

import argparse
import re
from datetime import date
from typing import Dict, List, Tuple

import certifi
from pymongo import MongoClient
from pymongo.errors import OperationFailure

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# keys, name, unique
EXPECTED_INDEXES: Dict[str, List[Tuple[Dict[str, int], str, bool]]] = {
    "habit_logs": [
        ({"user": 1, "task_id": 1, "completed_date": 1}, "user_task_date_unique", True),
        ({"user": 1, "completed_date": -1}, "user_date", False),
    ],
    "focus_sessions": [
        ({"user": 1, "completed_at": -1}, "user_completed", False),
    ],
    "tasks": [
        ({"user": 1, "created_at": -1}, "user_created", False),
    ],
}


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--uri", required=True, help="MongoDB connection URI")
    p.add_argument("--db", default="habit_tracker", help="Database name")
    p.add_argument("--create", action="store_true", help="Create missing indexes")
    return p.parse_args()

def ensure_expected_indexes(col, expected_defs, create=False):
    """
    An index counts as present when its KEYS (and uniqueness) match, whatever its name.
    Returns {"present": [...], "missing": [...]} by preferred name.
    """
    current = [(dict(ix.get("key", {})), bool(ix.get("unique", False))) for ix in col.list_indexes()]
    present, missing = [], []
    for keys, name, unique in expected_defs:
        if (keys, unique) in current:
            present.append(name)
            continue
        missing.append(name)
        if create:
            try:
                col.create_index(list(keys.items()), name=name, unique=unique)
            except OperationFailure as e:
                # usually duplicate (user, task_id, completed_date) rows blocking the unique index
                print(f"  ⚠️  Could not create index {name} on {col.name}: {e}")
    return {"present": present, "missing": missing}

def count_bad_dates(col) -> int:
    bad = 0
    for d in col.find({}, {"_id": 0, "completed_date": 1}):
        value = d.get("completed_date")
        if not (isinstance(value, str) and ISO_DATE_RE.match(value)):
            bad += 1
            continue
        try:
            date.fromisoformat(value)
        except ValueError:
            bad += 1
    return bad

def main():
    args = parse_args()
    kwargs = {"serverSelectionTimeoutMS": 8000}
    if args.uri.startswith("mongodb+srv://"):
        kwargs["tlsCAFile"] = certifi.where()
    client = MongoClient(args.uri, **kwargs)
    client.admin.command("ping")
    db = client[args.db]

    print(f"[cfg] DB={args.db} CREATE={args.create}")
    for name, defs in EXPECTED_INDEXES.items():
        summary = ensure_expected_indexes(db[name], defs, create=args.create)
        print(f"  {name:15} present={summary['present']} missing={summary['missing']}")

    bad = count_bad_dates(db.habit_logs)
    print(f"\n[habit_logs] malformed completed_date values: {bad}")
    client.close()


if __name__ == "__main__":
    main()
