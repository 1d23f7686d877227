"""Command line entry point."""
import sys
import json
import argparse
from pathlib import Path
from typing import List, Optional

from cardsense.config.settings import AppSettings, use_settings
from cardsense.orchestrator.processor import BatchResult, StatementProcessor
from cardsense.recommend.engine import RecommendationEngine
from cardsense.recommend.models import Priority
from cardsense.utils.exceptions import CardSenseError, ConfigError
from cardsense.utils.logger import configure_logging

EXIT_ERROR = 1
EXIT_ALL_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cardsense",
        description="CardSense credit card statement analyzer"
    )
    parser.add_argument("--config", type=Path, help="Path to a config.yaml overriding the defaults")
    parser.add_argument("--log-level", help="Override the configured log level")
    
    subparsers = parser.add_subparsers(dest="command", required=True)
    
    analyze = subparsers.add_parser("analyze", help="Analyze statements per card")
    _add_card_arguments(analyze)
    
    recommend = subparsers.add_parser("recommend", help="Pick a card for a purchase")
    _add_card_arguments(recommend)
    recommend.add_argument("--category", required=True, help="Purchase category, e.g. dining")
    recommend.add_argument("--amount", required=True, help="Purchase amount")
    recommend.add_argument(
        "--priority",
        choices=[priority.value for priority in Priority],
        default=Priority.BALANCE.value,
        help="Ranking mode (default: balance)"
    )
    
    return parser


def _add_card_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--card",
        dest="cards",
        action="append",
        nargs="+",
        type=Path,
        required=True,
        metavar="PDF",
        help="Statement PDFs of one card; repeat --card for each card"
    )
    parser.add_argument("--password", help="Password for encrypted statements")
    parser.add_argument(
        "--abort-on-failure",
        action="store_true",
        default=None,
        help="Stop the batch at the first document that fails"
    )


def load_settings(config_path: Optional[Path], log_level: Optional[str]) -> AppSettings:
    """Load settings and configure logging from them."""
    settings = AppSettings.load(config_path)
    if log_level:
        settings.log_level = log_level
    
    is_valid, message = settings.validate()
    if not is_valid:
        raise ConfigError(f"Invalid configuration: {message}")
    
    use_settings(settings)
    configure_logging(
        settings.log_level,
        Path(settings.log_dir) if settings.log_dir else None,
        settings.log_max_file_size_mb,
        settings.log_backup_count
    )
    return settings


def run_batch(args: argparse.Namespace, settings: AppSettings) -> BatchResult:
    processor = StatementProcessor(settings, password=args.password)
    return processor.analyze_batch(args.cards, abort_on_failure=args.abort_on_failure)


def analyze_command(args: argparse.Namespace, settings: AppSettings) -> int:
    result = run_batch(args, settings)
    _print_json(result.to_dict())
    return EXIT_ALL_FAILED if not result.cards else 0


def recommend_command(args: argparse.Namespace, settings: AppSettings) -> int:
    result = run_batch(args, settings)
    if not result.cards:
        _print_json(result.to_dict())
        return EXIT_ALL_FAILED
    
    engine = RecommendationEngine(settings)
    recommendation = engine.recommend(args.category, args.amount, result.cards, args.priority)
    
    output = recommendation.to_dict()
    output["failures"] = [failure.to_dict() for failure in result.failures]
    _print_json(output)
    return 0


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CardSense."""
    args = build_parser().parse_args(argv)
    
    try:
        settings = load_settings(args.config, args.log_level)
        if args.command == "analyze":
            return analyze_command(args, settings)
        return recommend_command(args, settings)
    except CardSenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
