"""Command line entry point for the Volunteer Matcher."""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from app.config.environment import EnvironmentConfig
from app.config.exceptions import ConfigurationError
from app.config.loader import load_config
from app.config.models import AppConfig
from app.domain.exceptions import NotFoundError, VolunteerMatcherError
from app.logging import get_logger
from app.logging.config import configure_logging
from app.matching.engine import MatchEngine
from app.matching.utils import serialize_results
from app.notifications.service import NotificationService
from app.persistence.base import DataStore
from app.persistence.exceptions import PersistenceError, RecordNotFoundError
from app.persistence.factory import create_data_store
from app.persistence.seed import seed_store
from app.services.enrollment import EnrollmentService
from app.services.matching import MatchService

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Args:
        config_path: Path to configuration file (None searches default locations)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with env_config.log_level set

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="volunteer-matcher",
        description="Volunteer Matcher - rank events for volunteers and manage enrollments",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--seed",
        type=Path,
        default=None,
        help="YAML file of volunteers and events to load before running the command",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    match_cmd = commands.add_parser("match", help="Rank events for a volunteer")
    match_cmd.add_argument("volunteer_id", type=int)

    candidates_cmd = commands.add_parser("candidates", help="List volunteers suited to an event")
    candidates_cmd.add_argument("event_id", type=int)

    enroll_cmd = commands.add_parser("enroll", help="Enroll a volunteer in an event")
    enroll_cmd.add_argument("volunteer_id", type=int)
    enroll_cmd.add_argument("event_id", type=int)

    enrolled_cmd = commands.add_parser("enrolled", help="List a volunteer's upcoming events")
    enrolled_cmd.add_argument("volunteer_id", type=int)

    history_cmd = commands.add_parser("history", help="List a volunteer's full enrollment history")
    history_cmd.add_argument("volunteer_id", type=int)

    browse_cmd = commands.add_parser("browse", help="List upcoming events a volunteer can still join")
    browse_cmd.add_argument("volunteer_id", type=int)

    notifications_cmd = commands.add_parser("notifications", help="List recorded notifications")
    notifications_cmd.add_argument("--volunteer", type=int, default=None, dest="volunteer_id")
    notifications_cmd.add_argument(
        "--mark-read",
        type=int,
        default=None,
        metavar="NOTIFICATION_ID",
        help="Mark a notification read before listing",
    )

    return parser


def run_command(
    args: argparse.Namespace,
    store: DataStore,
    match_service: MatchService,
    enrollment_service: EnrollmentService,
) -> object:
    """Execute a parsed command and return its JSON-serializable output."""
    if args.command == "match":
        return serialize_results(match_service.match_volunteer(args.volunteer_id))

    if args.command == "candidates":
        return [c.to_dict() for c in match_service.candidates_for_event(args.event_id)]

    if args.command == "enroll":
        return enrollment_service.enroll(args.volunteer_id, args.event_id).to_dict()

    if args.command == "enrolled":
        events = enrollment_service.enrolled_events(args.volunteer_id)
        return [event.model_dump(mode="json") for event in events]

    if args.command == "history":
        return [entry.to_dict() for entry in enrollment_service.history(args.volunteer_id)]

    if args.command == "browse":
        events = enrollment_service.browse_events(args.volunteer_id)
        return [event.model_dump(mode="json") for event in events]

    if args.command == "notifications":
        if args.mark_read is not None:
            store.mark_notification_read(args.mark_read)
        notifications = store.list_notifications(args.volunteer_id)
        return [n.model_dump(mode="json") for n in notifications]

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Volunteer Matcher CLI.

    Returns:
        Exit code (0 success, 1 configuration or fatal error, 2 not found)
    """
    load_dotenv()
    start_time = time.time()
    args = build_parser().parse_args(argv)

    store = None
    notification_service = None
    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        store = create_data_store(app_config.storage, env_config)

        logger.info(
            "Volunteer Matcher starting",
            extra={
                "event": "service.starting",
                "command": args.command,
                "backend": store.backend_name,
                "email_enabled": app_config.email.enabled,
            },
        )

        if args.seed is not None:
            seed_store(store, args.seed)

        notification_service = NotificationService(
            store, email_config=app_config.email, env_config=env_config
        )
        match_service = MatchService(store, MatchEngine(notification_service))
        enrollment_service = EnrollmentService(store)

        output = run_command(args, store, match_service, enrollment_service)
        print(json.dumps(output, indent=2, ensure_ascii=False))

        logger.info(
            "Command completed",
            extra={
                "event": "service.command.completed",
                "command": args.command,
                "duration_seconds": round(time.time() - start_time, 3),
            },
        )
        return EXIT_OK

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except NotFoundError as e:
        print(f"Not found: {e}", file=sys.stderr)
        logger.info(str(e), extra={"event": "service.not_found", "entity": e.entity})
        return EXIT_NOT_FOUND
    except RecordNotFoundError as e:
        print(f"Not found: {e}", file=sys.stderr)
        logger.info(str(e), extra={"event": "service.not_found"})
        return EXIT_NOT_FOUND
    except (VolunteerMatcherError, PersistenceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Command failed: {e}",
            extra={"event": "service.command.failed", "error_type": type(e).__name__},
        )
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return EXIT_OK
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "service.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return EXIT_ERROR
    finally:
        if notification_service is not None:
            notification_service.shutdown(wait=True)
        if store is not None:
            store.close()


if __name__ == "__main__":
    sys.exit(main())
