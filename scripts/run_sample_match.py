#!/usr/bin/env python3
"""Sample match harness for manual end-to-end validation.

Seeds a store from a YAML file, ranks events for every volunteer, enrolls
each volunteer in their top event twice (the second call must be a no-op)
and prints the recorded notifications.

Usage:
    # In-memory store (nothing written to disk)
    python scripts/run_sample_match.py --seed docs/sample_seed.yaml

    # SQLite file
    python scripts/run_sample_match.py --seed docs/sample_seed.yaml --database /tmp/matcher.db
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from app.logging.config import configure_logging
from app.matching.engine import MatchEngine
from app.matching.utils import build_rationale_dict
from app.notifications.service import NotificationService
from app.persistence import InMemoryDataStore, SQLDataStore, seed_store
from app.services import EnrollmentService, MatchService
from app.utils.timestamps import parse_iso_datetime


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the matcher against seed data")
    parser.add_argument("--seed", type=Path, default=Path("docs/sample_seed.yaml"))
    parser.add_argument("--database", type=str, default=None, help="SQLite file path")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument(
        "--as-of",
        default="2024-01-01T00:00:00Z",
        help="Instant treated as now; events starting earlier are skipped (ISO 8601)",
    )
    args = parser.parse_args()
    as_of = parse_iso_datetime(args.as_of)
    if as_of is None:
        parser.error(f"--as-of is not an ISO 8601 timestamp: {args.as_of}")

    load_dotenv()
    configure_logging(level=args.log_level, format_type="key-value", environment="sample")

    if args.database:
        store = SQLDataStore(f"sqlite:///{args.database}")
    else:
        store = InMemoryDataStore()

    try:
        volunteer_count, event_count = seed_store(store, args.seed)
        print_header(f"Seeded {volunteer_count} volunteers, {event_count} events ({store.backend_name})")

        clock = lambda: as_of
        match_service = MatchService(store, MatchEngine(NotificationService(store)), clock=clock)
        enrollment_service = EnrollmentService(store, clock=clock)

        for volunteer in store.list_volunteers():
            print_header(f"Volunteer {volunteer.volunteer_id}: {volunteer.full_name}")
            results = match_service.match_volunteer(volunteer.volunteer_id)
            if not results:
                print("  No events scored above the threshold")
                continue

            for result in results:
                print(f"  {result.event.name}: {json.dumps(build_rationale_dict(result))}")

            top = results[0].event.event_id
            first = enrollment_service.enroll(volunteer.volunteer_id, top)
            second = enrollment_service.enroll(volunteer.volunteer_id, top)
            print(f"  Enroll in {top}: created={first.created}, repeated created={second.created}")

        print_header("Notifications")
        for notification in store.list_notifications():
            print(f"  [{notification.volunteer_id}] {notification.message}")

        return 0
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
