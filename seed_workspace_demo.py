"""Seed the workspace store with a demo relation.

Usage is intentionally minimal:

1. Run this script once; if a workspace is already saved, nothing happens.
2. Run `python normalization_workbench.py` to compute keys, covers and decompositions.
"""
from __future__ import annotations

import argparse
import sys

from sqlalchemy.exc import OperationalError

from normalization_workbench import CONFIG, Workspace, WorkspaceStore


# Course enrolment relation with a transitive and a partial dependency.
DEMO_SCHEMA = "StudentID, CourseID, CourseName, Department, InstructorID, InstructorName, Grade"
DEMO_DEPENDENCIES = [
    {"from": ["CourseID"], "to": ["CourseName", "Department", "InstructorID"]},
    {"from": ["InstructorID"], "to": ["InstructorName"]},
    {"from": ["StudentID", "CourseID"], "to": ["Grade"]},
]


def seed(store: WorkspaceStore, force: bool = False) -> bool:
    """Save the demo workspace; returns False when a workspace already exists."""
    if not force and not store.is_empty():
        print("Workspace already present; nothing to do.")
        return False

    print("Seeding demo workspace...")
    store.save(Workspace(DEMO_SCHEMA, [dict(entry) for entry in DEMO_DEPENDENCIES]))
    print("Seeding complete.")
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the normalization workspace with a demo relation.")
    parser.add_argument(
        "--store",
        default=CONFIG["STORE"]["sqlalchemy_url"],
        help="SQLAlchemy URL of the workspace store (default: %(default)s)",
    )
    parser.add_argument("--force", action="store_true", help="Overwrite an existing workspace.")

    args = parser.parse_args()
    try:
        store = WorkspaceStore(args.store)
        seed(store, force=args.force)
    except OperationalError as exc:
        print("[ERROR] Could not open the workspace store. Check the --store URL and that its folder exists.")
        print(f"Details: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
