import os
from dataclasses import dataclass

from dotenv import load_dotenv

# DEFAULTS
DEFAULT_SEASON = 2024  # 2023-24
DEFAULT_TOP_N = 10
DEFAULT_SEASON_TYPE = 'Regular Season'
DEFAULT_OUTPUT_DIR = 'reports'
DEFAULT_LOG_FILE = 'reports/scoring_breakdown.log'
DEFAULT_API_TIMEOUT = 30
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_PAUSE = 60  # Seconds, multiplied by the attempt number


@dataclass(frozen=True)
class ReportConfig:
    season: int = DEFAULT_SEASON
    top_n: int = DEFAULT_TOP_N
    season_type: str = DEFAULT_SEASON_TYPE
    output_dir: str = DEFAULT_OUTPUT_DIR
    log_file: str = DEFAULT_LOG_FILE
    api_timeout: int = DEFAULT_API_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_pause: int = DEFAULT_RETRY_PAUSE


def _int_env(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def load_config():
    """
    Build the run configuration from the environment.

    Values in a local .env file are loaded first but never override
    variables that are already set in the process environment.
    """
    load_dotenv()
    return ReportConfig(
        season=_int_env('NBA_SEASON', DEFAULT_SEASON),
        top_n=_int_env('TOP_N', DEFAULT_TOP_N),
        season_type=os.getenv('SEASON_TYPE', DEFAULT_SEASON_TYPE),
        output_dir=os.getenv('OUTPUT_DIR', DEFAULT_OUTPUT_DIR),
        log_file=os.getenv('LOG_FILE', DEFAULT_LOG_FILE),
        api_timeout=_int_env('API_TIMEOUT', DEFAULT_API_TIMEOUT),
        max_attempts=_int_env('MAX_ATTEMPTS', DEFAULT_MAX_ATTEMPTS),
        retry_pause=_int_env('RETRY_PAUSE', DEFAULT_RETRY_PAUSE),
    )
