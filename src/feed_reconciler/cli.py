"""Command-line interface for the feed reconciler."""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from feed_reconciler import __version__
from feed_reconciler.config import Config, load_config
from feed_reconciler.errors import ConfigError, ReconcilerError
from feed_reconciler.models.report import DispatchOutcome, RunSummary
from feed_reconciler.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
logger = get_logger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_ABORTED = 2


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="feed-reconciler",
        description=(
            "Categorize 'for review' bank feed transactions with rules and AI, "
            "and apply confident add/match actions"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --feed for_review.csv --dry-run
  %(prog)s --feed for_review.csv --results applied.csv --limit 25
  %(prog)s --feed for_review.csv --no-ai -v
  %(prog)s --validate-only --config-dir ./config
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-f", "--feed",
        type=Path,
        default=None,
        help="CSV export of the 'for review' bank feed",
    )

    parser.add_argument(
        "--results",
        type=Path,
        default=None,
        metavar="FILE",
        help="Write applied actions to this CSV file",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path("config"),
        help="Base config directory (default: ./config)",
    )

    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Path to settings.yaml (default: <config-dir>/settings.yaml)",
    )

    parser.add_argument(
        "--rules",
        type=Path,
        default=None,
        help="Path to rules.yaml (default: <config-dir>/rules.yaml)",
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of transactions to process (default: from settings or 50)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Decide and log actions without applying them",
    )

    parser.add_argument(
        "--no-ai",
        action="store_true",
        help="Disable the AI fallback classifier",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration files only",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def validate_config(args: argparse.Namespace) -> int:
    """Validate configuration files.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    console.print("[bold]Validating configuration files...[/bold]\n")

    config_dir = args.config_dir
    settings_path = args.settings or (config_dir / "settings.yaml")
    rules_path = args.rules or (config_dir / "rules.yaml")

    for label, path in (("Settings", settings_path), ("Rules", rules_path)):
        if path.exists():
            console.print(f"[green]✓[/green] {label}: {path}")
        else:
            console.print(f"[yellow]![/yellow] {label} file not found: {path} (defaults apply)")

    try:
        config = load_config(
            settings_path=args.settings,
            rules_path=args.rules,
            config_dir=config_dir,
        )
    except ConfigError as e:
        console.print(f"\n[red]Error: {e}[/red]")
        return EXIT_CONFIG_ERROR

    policy = config.dispatch.policy
    console.print("\n[green]✓[/green] Configuration loaded successfully")
    console.print(f"  - {len(config.rules)} rules")
    console.print(
        f"  - thresholds: primary {policy.primary_threshold:.2f}, "
        f"fallback {policy.fallback_threshold:.2f}"
    )
    console.print(f"  - AI classifier: {'enabled' if config.ai.enabled else 'disabled'}")

    if config.ai.enabled and not args.no_ai:
        try:
            config.require_credentials()
        except ConfigError as e:
            console.print(f"\n[yellow]Warning: {e}[/yellow]")

    console.print("\n[green]Configuration is valid.[/green]")
    return EXIT_OK


def display_summary(summary: RunSummary) -> None:
    """Display the run summary as a table."""
    counters = summary.counters
    table = Table(title="Reconciliation Summary" + (" (dry run)" if summary.dry_run else ""))
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    table.add_row("Loaded", str(summary.loaded))
    table.add_row("Added", str(counters.added))
    table.add_row("Matched", str(counters.matched))
    table.add_row("Marked for review", str(counters.marked_for_review))
    table.add_row("Failed", str(counters.failed))
    if counters.skipped_status:
        table.add_row("Not for review", str(counters.skipped_status))
    console.print(table)

    executed = [r for r in summary.results if r.outcome is not DispatchOutcome.SKIPPED]
    if executed:
        console.print("\n[bold]Applied actions[/bold]")
        for result in executed:
            decision = result.decision
            if decision is None:
                continue
            console.print(
                f"  {result.outcome.value}: {decision.category} "
                f"({decision.confidence:.2f}, {decision.reason or decision.source.value})"
            )


def build_engine(config: Config, feed: object, use_ai: bool):
    """Wire the engine's collaborators from configuration.

    Returns:
        Tuple of (engine, ai client or None).
    """
    from feed_reconciler.integrations import NullNotifier, SlackWebhookNotifier
    from feed_reconciler.processing import ActionDispatcher, ReconciliationEngine, RuleMatcher
    from feed_reconciler.processing.ai import AIClassifier, AIClient

    client = None
    classifier = None
    if use_ai:
        client = AIClient(config=config.ai.client)
        classifier = AIClassifier(
            client,
            policy=config.dispatch.policy,
            default_confidence=config.ai.default_confidence,
            usage_stats=client.usage_stats,
        )

    notifier = SlackWebhookNotifier.from_env(config.notifier.slack_webhook_env) or NullNotifier()

    engine = ReconciliationEngine(
        matcher=RuleMatcher(config.rules),
        dispatcher=ActionDispatcher(
            feed,  # type: ignore[arg-type]
            policy=config.dispatch.policy,
            dry_run=config.dispatch.dry_run,
        ),
        classifier=classifier,
        notifier=notifier,
    )
    return engine, client


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 success, 1 configuration error, 2 aborted run).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = get_log_level(args.verbose)

    if args.validate_only:
        setup_logging(level=log_level, console_output=args.verbose > 0)
        return validate_config(args)

    if args.feed is None:
        console.print("[red]Error: --feed is required[/red]")
        parser.print_usage()
        return EXIT_CONFIG_ERROR

    try:
        config = load_config(
            settings_path=args.settings,
            rules_path=args.rules,
            config_dir=args.config_dir,
        )
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        console.print("Run with --validate-only to check configuration files.")
        return EXIT_CONFIG_ERROR

    # Explicit verbosity wins over the configured level
    setup_logging(
        level=log_level if args.verbose else config.logging.level,
        log_file=config.logging.file,
        console_output=args.verbose > 0,
    )

    if args.limit is not None:
        if args.limit < 0:
            console.print("[red]Error: --limit must be >= 0[/red]")
            return EXIT_CONFIG_ERROR
        config.feed.limit = args.limit
    if args.dry_run:
        config.dispatch.dry_run = True
    use_ai = config.ai.enabled and not args.no_ai

    from feed_reconciler.integrations import CsvBankFeed

    try:
        if use_ai:
            config.require_credentials()
        feed = CsvBankFeed(args.feed)
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return EXIT_CONFIG_ERROR

    console.print(f"[bold]Feed Reconciler v{__version__}[/bold]\n")
    console.print(f"Feed: {args.feed}")
    console.print(f"Rules: {len(config.rules)}, AI fallback: {'on' if use_ai else 'off'}")
    if config.dispatch.dry_run:
        console.print("[yellow]Dry run: no actions will be applied[/yellow]")

    engine, client = build_engine(config, feed, use_ai)

    try:
        with console.status("[bold green]Reconciling transactions..."):
            summary = asyncio.run(engine.run(feed, limit=config.feed.limit))
    except ReconcilerError as e:
        logger.error(f"Run aborted: {e}")
        console.print(f"[red]Run aborted: {e}[/red]")
        return EXIT_ABORTED

    display_summary(summary)

    if client is not None and client.usage_stats.total_requests:
        console.print(f"\n{client.get_usage_summary()}")

    if args.results is not None:
        count = feed.write_results(args.results)
        console.print(f"\nWrote {count} applied actions to {args.results}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
