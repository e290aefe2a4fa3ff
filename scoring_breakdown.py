"""
Scoring breakdown pipeline.

Turns raw player game logs into the top-N scoring breakdown tables:

    game logs -> season totals -> top N -> category breakdown -> long format

Every stage takes a DataFrame and returns a new one. Nothing is modified in
place and nothing is carried between runs.

Decisions worth knowing when reading the output:
- PPG is rounded half-up to one decimal, computed in integer arithmetic so
  10.25 always becomes 10.3.
- Ranking ties on PPG fall back to total points (desc), then player name (asc).
- A player with zero total points gets a share of 0.0 in every category
  (ZERO_TOTAL_SHARE) unless the caller asks for on_zero_total='raise'.
"""
import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from errors import DataIntegrityError, DivisionUndefinedError, EmptyInputError

logger = logging.getLogger(__name__)

STAT_COLUMNS = ['pts', 'fgm', 'fg3m', 'ftm']
REQUIRED_COLUMNS = ['player_name'] + STAT_COLUMNS

# Stacking order is fixed so every chart reads the same way
CATEGORIES = ['2PT', '3PT', 'FT']
POINT_COLUMNS = {'2PT': 'pts_2pt', '3PT': 'pts_3pt', 'FT': 'pts_ft'}
SHARE_COLUMNS = {'2PT': 'pct_2pt', '3PT': 'pct_3pt', 'FT': 'pct_ft'}

ZERO_TOTAL_SHARE = 0.0
DEFAULT_TOP_N = 10


@dataclass(frozen=True)
class ScoringReport:
    totals: pd.DataFrame
    top_players: pd.DataFrame
    breakdown: pd.DataFrame
    long_points: pd.DataFrame
    long_percent: pd.DataFrame


def _reject(df, mask, reason):
    if mask.any():
        first = df.loc[mask].iloc[0]
        raise DataIntegrityError(
            f"{int(mask.sum())} game log row(s) {reason} (first: {first['player_name']!r})"
        )


def validate_game_logs(game_logs):
    """
    Checks raw game logs at ingestion and returns a cleaned copy.

    Null stat values become 0 and every stat column is cast to int64. Rows
    that could only produce nonsense downstream (negative stats, more threes
    than field goals, points that don't add up from the makes) raise
    DataIntegrityError instead of being dropped.
    """
    if game_logs is None or len(game_logs) == 0:
        raise EmptyInputError("No game log rows to aggregate")

    missing = [c for c in REQUIRED_COLUMNS if c not in game_logs.columns]
    if missing:
        raise DataIntegrityError(f"Game logs are missing required columns: {missing}")

    df = game_logs.copy()

    for col in STAT_COLUMNS:
        try:
            values = pd.to_numeric(df[col])
        except (TypeError, ValueError) as e:
            raise DataIntegrityError(f"Column '{col}' holds non-numeric values: {e}") from e
        values = values.fillna(0)
        if (values % 1 != 0).any():
            raise DataIntegrityError(f"Column '{col}' holds fractional values")
        df[col] = values.astype('int64')

    blank_name = df['player_name'].isna() | df['player_name'].astype(str).str.strip().eq('')
    if blank_name.any():
        raise DataIntegrityError(f"{int(blank_name.sum())} game log row(s) have no player name")

    _reject(df, (df[STAT_COLUMNS] < 0).any(axis=1), "have negative stat values")
    _reject(df, df['fg3m'] > df['fgm'], "have more 3PT makes than field goal makes")

    expected_pts = 2 * df['fgm'] + df['fg3m'] + df['ftm']
    _reject(df, df['pts'] != expected_pts, "have points that don't match 2*FGM + FG3M + FTM")

    logger.info(f"Validated {len(df)} game log rows for {df['player_name'].nunique()} players.")
    return df


def aggregate_player_totals(game_logs):
    """One row per player: total points, games played and points per game."""
    if game_logs is None or len(game_logs) == 0:
        raise EmptyInputError("No game log rows to aggregate")

    pts = pd.to_numeric(game_logs['pts']).fillna(0).astype('int64')
    grouped = pts.groupby(game_logs['player_name'])

    totals = pd.DataFrame({
        'total_pts': grouped.sum().astype('int64'),
        'games_played': grouped.size().astype('int64'),
    })

    # Round half-up to one decimal without float error: (20t + g) // 2g == round(10t / g)
    totals['ppg'] = ((20 * totals['total_pts'] + totals['games_played'])
                     // (2 * totals['games_played'])) / 10

    totals = totals.rename_axis('player_name').reset_index()
    logger.info(f"Aggregated season totals for {len(totals)} players.")
    return totals


def select_top_players(totals, n=DEFAULT_TOP_N):
    """
    Top ``n`` players by points per game, with a 1-based ``rank`` column.

    Fewer than ``n`` players just returns all of them.
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise ValueError(f"n must be a positive integer, got {n!r}")

    ranked = totals.sort_values(
        ['ppg', 'total_pts', 'player_name'],
        ascending=[False, False, True],
        kind='mergesort',
    ).head(n).reset_index(drop=True)

    ranked['rank'] = np.arange(1, len(ranked) + 1)
    logger.info(f"Selected top {len(ranked)} players by PPG (requested {n}).")
    return ranked


def compute_scoring_breakdown(game_logs, top_players, on_zero_total='sentinel'):
    """
    Splits each selected player's points into 2PT, 3PT and FT buckets.

    ``game_logs`` is the full (validated) row set; only the selected players'
    rows are used. Output keeps the ranking order of ``top_players``.
    """
    if on_zero_total not in ('sentinel', 'raise'):
        raise ValueError(f"on_zero_total must be 'sentinel' or 'raise', got {on_zero_total!r}")

    selected = game_logs[game_logs['player_name'].isin(top_players['player_name'])]
    makes = selected.groupby('player_name')[['fgm', 'fg3m', 'ftm']].sum().reset_index()

    breakdown = top_players.merge(makes, on='player_name', how='left')
    breakdown[['fgm', 'fg3m', 'ftm']] = breakdown[['fgm', 'fg3m', 'ftm']].fillna(0).astype('int64')

    breakdown['pts_2pt'] = (breakdown['fgm'] - breakdown['fg3m']) * 2
    breakdown['pts_3pt'] = breakdown['fg3m'] * 3
    breakdown['pts_ft'] = breakdown['ftm']

    category_sum = breakdown[list(POINT_COLUMNS.values())].sum(axis=1)
    mismatch = category_sum != breakdown['total_pts']
    if mismatch.any():
        player = breakdown.loc[mismatch, 'player_name'].iloc[0]
        raise DataIntegrityError(
            f"Category points don't add up to total points for {int(mismatch.sum())} player(s) (first: {player!r})"
        )

    zero_total = breakdown['total_pts'] == 0
    if zero_total.any():
        players = breakdown.loc[zero_total, 'player_name'].tolist()
        if on_zero_total == 'raise':
            raise DivisionUndefinedError(f"Scoring share is undefined for players with zero points: {players}")
        logger.warning(f"Zero total points for {players}; using share {ZERO_TOTAL_SHARE} for every category.")

    denominator = breakdown['total_pts'].where(~zero_total)
    for category in CATEGORIES:
        share = breakdown[POINT_COLUMNS[category]] / denominator
        breakdown[SHARE_COLUMNS[category]] = share.fillna(ZERO_TOTAL_SHARE)

    breakdown = breakdown.drop(columns=['fgm', 'fg3m', 'ftm'])
    logger.info(f"Computed scoring breakdown for {len(breakdown)} players.")
    return breakdown


def _player_order(df):
    return pd.CategoricalDtype(categories=list(df['player_name']), ordered=True)


def to_long_format(breakdown):
    """Unpivots the category columns into (player_name, category, points) rows."""
    long_df = breakdown.melt(
        id_vars=['player_name'],
        value_vars=[POINT_COLUMNS[c] for c in CATEGORIES],
        var_name='category',
        value_name='points',
    )
    long_df['category'] = long_df['category'].map({v: k for k, v in POINT_COLUMNS.items()})
    long_df['category'] = long_df['category'].astype(
        pd.CategoricalDtype(categories=CATEGORIES, ordered=True)
    )
    long_df['player_name'] = long_df['player_name'].astype(_player_order(breakdown))

    return long_df.sort_values(['player_name', 'category']).reset_index(drop=True)


def to_percent_format(long_points):
    """Same shape as the long table, with each player's points as a share of their own total."""
    player_total = long_points.groupby('player_name', observed=True)['points'].transform('sum')

    percent = long_points[['player_name', 'category']].copy()
    percent['percent'] = (long_points['points'] / player_total.where(player_total > 0)).fillna(ZERO_TOTAL_SHARE)
    return percent


def pivot_to_wide(long_df, value='points'):
    """Pivots a long table back to one row per player, in ranking order."""
    columns = POINT_COLUMNS if value == 'points' else SHARE_COLUMNS
    flat = long_df.assign(category=long_df['category'].astype(str))
    wide = flat.pivot(index='player_name', columns='category', values=value)
    wide = wide.reindex(columns=CATEGORIES).rename(columns=columns)
    wide.columns.name = None

    wide = wide.reset_index()
    wide['player_name'] = wide['player_name'].astype(str)
    return wide


def check_share_consistency(breakdown, long_percent, tolerance=1e-9):
    """The percent view has to agree with the shares computed on the breakdown."""
    wide = pivot_to_wide(long_percent, value='percent')
    merged = breakdown[['player_name'] + list(SHARE_COLUMNS.values())].merge(
        wide, on='player_name', suffixes=('', '_view')
    )
    if len(merged) != len(breakdown):
        raise DataIntegrityError("Percent view and breakdown cover different players")

    for col in SHARE_COLUMNS.values():
        diff = (merged[col] - merged[f"{col}_view"]).abs()
        if (diff > tolerance).any():
            player = merged.loc[diff > tolerance, 'player_name'].iloc[0]
            raise DataIntegrityError(f"Share mismatch on {col} for {player!r}")


def run_pipeline(game_logs, top_n=DEFAULT_TOP_N, on_zero_total='sentinel'):
    """Runs every stage and returns all intermediate tables."""
    clean = validate_game_logs(game_logs)
    totals = aggregate_player_totals(clean)
    top_players = select_top_players(totals, top_n)
    breakdown = compute_scoring_breakdown(clean, top_players, on_zero_total=on_zero_total)

    long_points = to_long_format(breakdown)
    long_percent = to_percent_format(long_points)
    check_share_consistency(breakdown, long_percent)

    return ScoringReport(
        totals=totals,
        top_players=top_players,
        breakdown=breakdown,
        long_points=long_points,
        long_percent=long_percent,
    )
