"""
Seed script for Voice2Action demo data (Firestore or the in-memory store).

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Other seed file: python scripts/seed_db.py --file path/to/seed.json --apply

Behavior:
  - Loads a JSON list of reports (`db_seed.json` in the repo root by default).
  - Each report goes through IssueService.create_issue, so category, urgency
    score, tracking id and organization registration work exactly as for a
    real submission.
  - An optional "status" / "admin_notes" on a report is applied afterwards
    through the admin update path.

NOTE: With USE_MOCK_DB=true the data only lives for this process, which is
still useful to check that a seed file is valid.
"""

import argparse
import json
import os
from typing import Any, Dict, List

from voice2action.models.issue import AdminIssueUpdate, IssueCreate
from voice2action.services.issue_service import get_issue_service

ADMIN_FIELDS = ("status", "admin_notes")


def load_seed(path: str = "./db_seed.json") -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_to_db(reports: List[Dict[str, Any]], apply: bool = False):
    service = get_issue_service() if apply else None
    for index, report in enumerate(reports):
        payload = IssueCreate(**{k: v for k, v in report.items() if k not in ADMIN_FIELDS})
        print(f"Preparing #{index}: {payload.title!r} (ward={payload.ward_code}, org={payload.org_code})")
        if not apply:
            continue

        issue = service.create_issue(payload)
        print(f"Created: {issue.tracking_id} [{issue.category}, sentiment {issue.sentiment_score}]")

        if any(report.get(field) for field in ADMIN_FIELDS):
            result = service.update_issue(
                issue.id,
                AdminIssueUpdate(status=report.get("status"), admin_notes=report.get("admin_notes")),
            )
            print(f"Updated: {issue.tracking_id} -> {result['issue'].status.value}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--file", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file (JSON list)")
    args = parser.parse_args()

    if not os.path.exists(args.file):
        print(f"Seed file not found: {args.file}")
        return

    write_to_db(load_seed(args.file), apply=args.apply)

    if args.apply:
        print("Seeding completed.")
    else:
        print("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
