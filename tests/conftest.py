"""
Pytest configuration for the scoring breakdown tests.

Nothing here touches the network: game logs are built in memory.
"""

import matplotlib
matplotlib.use('Agg')

import pandas as pd
import pytest


def _row(player_name, fgm, fg3m, ftm, **extra):
    row = {
        'player_name': player_name,
        'pts': 2 * fgm + fg3m + ftm,
        'fgm': fgm,
        'fg3m': fg3m,
        'ftm': ftm,
    }
    row.update(extra)
    return row


@pytest.fixture
def make_game_logs():
    """Build a game log frame from (player_name, fgm, fg3m, ftm) tuples; points are derived."""
    def _make(rows):
        return pd.DataFrame([_row(*r) for r in rows])
    return _make


@pytest.fixture
def league_game_logs(make_game_logs):
    """15 players, 4 games each, PPG strictly increasing with the player number."""
    rows = []
    for i in range(15):
        for g in range(4):
            fgm = 5 + i + g
            fg3m = i % 2 + g % 2
            ftm = i + g
            rows.append((f"Player {i:02d}", fgm, fg3m, ftm))
    return make_game_logs(rows)
