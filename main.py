"""Command-line entry point for the Graylog → Jira bridge.

Loads environment variables, validates the configuration, and fires a single
alert through the decision engine: the alert either updates the open Jira
ticket with the same fingerprint or creates a new one.
"""
from dotenv import load_dotenv
import argparse
import sys

# Load environment variables first, before any other imports
load_dotenv()

from jirabridge import AlarmEngine, AlertContext, JiraBridgeError, compute_fingerprint
from jirabridge.config import get_config
from jirabridge.utils.logger import configure_logging, log_error, log_info


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send a Graylog alert to Jira.")
    parser.add_argument('--stream', type=str, default="", help='Stream identifier of the alert.')
    parser.add_argument('--stream-title', type=str, default="", help='Stream title of the alert.')
    parser.add_argument('--condition', type=str, default=None,
                        help='Condition result text (used as the description when none is set).')
    parser.add_argument('--title', type=str, default="", help='Ticket title (defaults to JIRA_TITLE).')
    parser.add_argument('--description', type=str, default="", help='Ticket description (defaults to JIRA_DESCRIPTION).')
    fp = parser.add_mutually_exclusive_group()
    fp.add_argument('--fingerprint', type=str, help='Precomputed alert fingerprint.')
    fp.add_argument('--fingerprint-source', type=str, help='Text to hash (MD5) into the alert fingerprint.')
    parser.add_argument('--check-config', action='store_true', help='Validate the configuration and exit.')
    parser.add_argument('--healthcheck', action='store_true', help='Check Jira connectivity and exit.')
    return parser


def run(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = get_config()
    configure_logging(config.log_level, config.log_format)
    config.log_configuration()

    issues = config.validate_configuration()
    if issues:
        log_error("Configuration validation failed", issues=issues)
        print("❌ Configuration issues found:")
        for issue in issues:
            print(f"  - {issue}")
        print("\nPlease fix these issues and try again.")
        return 1
    if args.check_config:
        print("✅ Configuration is valid.")
        return 0

    if args.healthcheck:
        from jirabridge.healthcheck import run_health_checks

        all_healthy, _ = run_health_checks(config=config)
        return 0 if all_healthy else 1

    fingerprint = args.fingerprint or ""
    if args.fingerprint_source:
        fingerprint = compute_fingerprint(args.fingerprint_source)

    context = AlertContext(
        stream_id=args.stream,
        stream_title=args.stream_title,
        condition_result=args.condition,
        title=args.title,
        description=args.description,
        fingerprint=fingerprint,
    )

    engine = AlarmEngine.from_config(config)
    try:
        result = engine.trigger(context)
    except JiraBridgeError as e:
        print(f"❌ {e.message}")
        return 1

    log_info("Alert handled", action=result.action, ticket_key=result.ticket_key,
             occurrences=result.occurrence_count)
    print(f"✅ {result.action.capitalize()} {result.ticket_key}")
    return 0


if __name__ == "__main__":
    sys.exit(run())
