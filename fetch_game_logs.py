"""
Game log sources for the scoring breakdown report.

A source is anything with a ``fetch(season)`` method that returns one row per
player per game as a DataFrame with snake_case columns. The pipeline only ever
sees that finished table; how it was retrieved stays in here.
"""
import os
import time
import logging

import pandas as pd
from nba_api.stats.endpoints import playergamelogs
from requests.exceptions import ReadTimeout, ConnectionError, JSONDecodeError

from errors import FetchError

logger = logging.getLogger(__name__)

# Network errors worth waiting out. Anything else is a real bug and propagates.
RETRYABLE_ERRORS = (ReadTimeout, ConnectionError, JSONDecodeError)

# Provider column -> pipeline column
COLUMN_MAP = {
    'player_id': ['PLAYER_ID', 'personId'],
    'player_name': ['PLAYER_NAME', 'playerName'],
    'team_abbreviation': ['TEAM_ABBREVIATION', 'teamTricode'],
    'game_id': ['GAME_ID', 'gameId'],
    'game_date': ['GAME_DATE', 'gameDate'],
    'season_year': ['SEASON_YEAR'],
    'pts': ['PTS', 'points'],
    'fgm': ['FGM', 'fieldGoalsMade'],
    'fg3m': ['FG3M', 'threePointersMade'],
    'ftm': ['FTM', 'freeThrowsMade'],
}


def season_string(season):
    """2024 -> '2023-24' (seasons are named by the year they end in)."""
    season = int(season)
    return f"{season - 1}-{str(season)[-2:]}"


def prepare_df(df):
    """Renames provider columns and drops the ones the report never reads."""
    final_cols = {}
    for col, api_options in COLUMN_MAP.items():
        for api_col in api_options:
            if api_col in df.columns:
                final_cols[api_col] = col
                break

    df_renamed = df.rename(columns=final_cols)
    return df_renamed[[c for c in COLUMN_MAP if c in df_renamed.columns]].copy()


class NbaApiGameLogSource:
    """Pulls a full season of player game logs from stats.nba.com via nba_api."""

    def __init__(self, season_types=('Regular Season',), timeout=30, max_attempts=3, retry_pause=60):
        if isinstance(season_types, str):
            season_types = (season_types,)
        self.season_types = tuple(season_types)
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.retry_pause = retry_pause

    def _request(self, season, season_type):
        attempts = 0
        while True:
            try:
                logger.info(f"Requesting {season_type} game logs for {season} (Attempt {attempts + 1})...")
                endpoint = playergamelogs.PlayerGameLogs(
                    season_nullable=season,
                    season_type_nullable=season_type,
                    timeout=self.timeout,
                )
                frames = endpoint.get_data_frames()
                break
            except RETRYABLE_ERRORS as e:
                attempts += 1
                if attempts >= self.max_attempts:
                    raise FetchError(
                        f"Giving up on {season_type} game logs for {season} after {attempts} attempts: {e}"
                    ) from e

                # 1st failure waits retry_pause, 2nd waits retry_pause * 2, ...
                current_pause = self.retry_pause * attempts
                logger.warning(f"API LIMIT/TIMEOUT on {season} {season_type} (Attempt {attempts}). "
                               f"Pausing for {current_pause}s: {e}")
                time.sleep(current_pause)

        if not frames:
            raise FetchError(f"NBA API returned no result set for {season} {season_type}")
        return frames[0]

    def fetch(self, season):
        season_str = season_string(season)
        parts = []
        for season_type in self.season_types:
            df = self._request(season_str, season_type)
            logger.info(f"Downloaded {len(df)} {season_type} player game logs for {season_str}.")
            parts.append(prepare_df(df))

        return pd.concat(parts, ignore_index=True)


class CsvGameLogSource:
    """Reads game logs previously exported to CSV, for offline runs."""

    def __init__(self, path):
        self.path = path

    def fetch(self, season):
        if not os.path.exists(self.path):
            raise FetchError(f"Game log file not found: {self.path}")

        df = pd.read_csv(self.path)
        df = prepare_df(df)

        # An export may span several seasons; keep the requested one when we can tell
        if 'season_year' in df.columns:
            df = df[df['season_year'] == season_string(season)].copy()

        logger.info(f"Loaded {len(df)} player game logs from {self.path}.")
        return df.reset_index(drop=True)
