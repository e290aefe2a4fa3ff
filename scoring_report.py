import os
import sys
import logging
import argparse
from dataclasses import replace

from config import load_config
from errors import ScoringPipelineError
from logger_config import setup_logger
from fetch_game_logs import NbaApiGameLogSource, CsvGameLogSource, season_string
from scoring_breakdown import run_pipeline
from plot_scoring_breakdown import DEFAULT_THEME, plot_points_breakdown, plot_share_breakdown
from commentary import build_commentary, write_commentary

logger = logging.getLogger(__name__)


def run_report(source, config, theme=DEFAULT_THEME):
    """
    Fetch -> pipeline -> charts -> commentary for one season.

    Nothing is written until the whole pipeline has succeeded, so a failed
    run never leaves a partial report behind. Returns the written paths.
    """
    label = season_string(config.season)
    logger.info(f"--- Scoring breakdown for {label} ({config.season_type}), top {config.top_n} ---")

    game_logs = source.fetch(config.season)
    report = run_pipeline(game_logs, top_n=config.top_n)
    lines = build_commentary(report.breakdown, season_label=label)

    os.makedirs(config.output_dir, exist_ok=True)
    paths = {
        'table': os.path.join(config.output_dir, f"scoring_breakdown_{config.season}.csv"),
        'points_chart': os.path.join(config.output_dir, f"scoring_breakdown_points_{config.season}.png"),
        'share_chart': os.path.join(config.output_dir, f"scoring_breakdown_share_{config.season}.png"),
        'commentary': os.path.join(config.output_dir, f"scoring_commentary_{config.season}.txt"),
    }

    report.breakdown.to_csv(paths['table'], index=False)
    plot_points_breakdown(report.long_points, paths['points_chart'], theme=theme, season_label=label)
    plot_share_breakdown(report.long_percent, paths['share_chart'], theme=theme, season_label=label)
    write_commentary(lines, paths['commentary'])

    for line in lines:
        logger.info(line)
    return paths


def build_source(config, csv_path=None):
    if csv_path:
        return CsvGameLogSource(csv_path)
    return NbaApiGameLogSource(
        season_types=config.season_type,
        timeout=config.api_timeout,
        max_attempts=config.max_attempts,
        retry_pause=config.retry_pause,
    )


def _positive_int(value):
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return n


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Top-N NBA scorers broken down by 2PT, 3PT and FT points',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python scoring_report.py                       # Defaults from .env / environment
  python scoring_report.py --season 2024         # 2023-24 season
  python scoring_report.py --top-n 15 --season-type Playoffs
  python scoring_report.py --csv exports/game_logs.csv   # Offline run
        '''
    )
    parser.add_argument('--season', type=int, help='Season by ending year (e.g., 2024 for 2023-24)')
    parser.add_argument('--top-n', type=_positive_int, help='How many scorers to keep')
    parser.add_argument('--season-type', choices=['Regular Season', 'Playoffs', 'PlayIn'], help='Season segment')
    parser.add_argument('--output-dir', help='Where charts, table and commentary are written')
    parser.add_argument('--csv', help='Read game logs from this CSV instead of the NBA API')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = load_config()

    overrides = {
        'season': args.season,
        'top_n': args.top_n,
        'season_type': args.season_type,
        'output_dir': args.output_dir,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})

    setup_logger(config.log_file)

    try:
        run_report(build_source(config, args.csv), config)
    except ScoringPipelineError as e:
        logger.error(f"Scoring report failed: {e}")
        return 1

    logger.info("--- Scoring report finished ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
