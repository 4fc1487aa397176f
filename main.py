# main.py

"""Entry point for the estate_predict application (TUI or headless CLI)."""

import argparse
import asyncio
import locale
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("estate_predict.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="estate_predict",
        description="Real estate price predictor client.",
        epilog=(
            f"Service: {Settings.API_BASE_URL} "
            "(override with ESTATE_PREDICT_API_URL)."
        ),
    )
    parser.add_argument(
        "--list-states",
        action="store_true",
        default=False,
        dest="list_states",
        help="Print the states the service can price.",
    )
    parser.add_argument(
        "--list-cities",
        default=None,
        metavar="STATE",
        dest="list_cities",
        help="Print the cities available for STATE.",
    )
    parser.add_argument(
        "--state",
        default=None,
        help="State to predict for (requires --city and --year).",
    )
    parser.add_argument(
        "--city",
        default=None,
        help="City within --state.",
    )
    parser.add_argument(
        "--year",
        type=int,
        default=None,
        help=f"Year between {Settings.YEAR_MIN} and {Settings.YEAR_MAX}.",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        default=False,
        help="Show the most recent predictions.",
    )
    parser.add_argument(
        "--clear-history",
        action="store_true",
        default=False,
        dest="clear_history",
        help="Delete the stored prediction history.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    return parser


def _wants_prediction(args: argparse.Namespace) -> bool:
    return any(v is not None for v in (args.state, args.city, args.year))


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import EstatePredictApp

    try:
        app = EstatePredictApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("estate_predict TUI shutting down")


def main() -> None:
    """Route to the TUI (no args) or one of the headless commands."""
    parser = _build_parser()
    args = parser.parse_args()

    if _wants_prediction(args) and None in (args.state, args.city, args.year):
        parser.error("--state, --city and --year must be given together")

    headless = (
        args.list_states
        or args.list_cities is not None
        or args.history
        or args.clear_history
        or _wants_prediction(args)
    )
    log_file = setup_logging(console=headless)
    logger.info("estate_predict starting, log file: %s", log_file)

    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.warning("Falling back to default collation: %s", exc)

    from src.cli import runner

    if args.clear_history:
        sys.exit(runner.run_clear_history())
    elif args.history:
        sys.exit(runner.run_show_history(args.output_format))
    elif args.list_states:
        sys.exit(asyncio.run(runner.cli_list_states(args.output_format)))
    elif args.list_cities is not None:
        sys.exit(
            asyncio.run(
                runner.cli_list_cities(args.list_cities, args.output_format)
            )
        )
    elif _wants_prediction(args):
        sys.exit(
            asyncio.run(
                runner.cli_predict(
                    state=args.state,
                    city=args.city,
                    year=args.year,
                    output_format=args.output_format,
                )
            )
        )
    else:
        _run_tui()


if __name__ == "__main__":
    main()
