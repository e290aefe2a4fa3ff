import pandas as pd
import pytest
from requests.exceptions import ReadTimeout

import fetch_game_logs
from errors import FetchError
from fetch_game_logs import CsvGameLogSource, NbaApiGameLogSource, prepare_df, season_string


def _provider_frame():
    return pd.DataFrame({
        'SEASON_YEAR': ['2023-24', '2023-24'],
        'PLAYER_ID': [203999, 201939],
        'PLAYER_NAME': ['Nikola Jokic', 'Stephen Curry'],
        'TEAM_ABBREVIATION': ['DEN', 'GSW'],
        'GAME_ID': ['0022300001', '0022300002'],
        'GAME_DATE': ['2023-10-24T00:00:00', '2023-10-24T00:00:00'],
        'MIN': [36.0, 34.5],
        'PTS': [29, 31],
        'FGM': [12, 10],
        'FG3M': [1, 5],
        'FTM': [4, 6],
        'REB': [13, 5],
    })


class FakePlayerGameLogs:
    """Stands in for the nba_api endpoint; fails ``failures`` times before answering."""
    calls = []
    failures = 0
    frames = None

    def __init__(self, **kwargs):
        FakePlayerGameLogs.calls.append(kwargs)
        if len(FakePlayerGameLogs.calls) <= FakePlayerGameLogs.failures:
            raise ReadTimeout("read timed out")

    def get_data_frames(self):
        return FakePlayerGameLogs.frames


@pytest.fixture
def fake_endpoint(monkeypatch):
    FakePlayerGameLogs.calls = []
    FakePlayerGameLogs.failures = 0
    FakePlayerGameLogs.frames = [_provider_frame()]
    monkeypatch.setattr(fetch_game_logs.playergamelogs, 'PlayerGameLogs', FakePlayerGameLogs)

    sleeps = []
    monkeypatch.setattr(fetch_game_logs.time, 'sleep', sleeps.append)
    FakePlayerGameLogs.sleeps = sleeps
    return FakePlayerGameLogs


@pytest.mark.parametrize("season, expected", [(2024, '2023-24'), (2000, '1999-00'), (2010, '2009-10')])
def test_season_string(season, expected):
    assert season_string(season) == expected


def test_prepare_df_renames_and_drops_unused_columns():
    df = prepare_df(_provider_frame())

    assert 'player_name' in df.columns
    assert 'fg3m' in df.columns
    assert 'REB' not in df.columns
    assert 'MIN' not in df.columns


def test_nba_api_fetch_maps_columns(fake_endpoint):
    source = NbaApiGameLogSource(timeout=5)
    df = source.fetch(2024)

    assert df['player_name'].tolist() == ['Nikola Jokic', 'Stephen Curry']
    assert df['pts'].tolist() == [29, 31]
    assert fake_endpoint.calls == [
        {'season_nullable': '2023-24', 'season_type_nullable': 'Regular Season', 'timeout': 5}
    ]


def test_nba_api_fetch_concatenates_season_types(fake_endpoint):
    source = NbaApiGameLogSource(season_types=['Regular Season', 'Playoffs'])
    df = source.fetch(2024)

    assert len(df) == 4
    assert [c['season_type_nullable'] for c in fake_endpoint.calls] == ['Regular Season', 'Playoffs']


def test_nba_api_fetch_retries_with_growing_pause(fake_endpoint):
    fake_endpoint.failures = 2
    source = NbaApiGameLogSource(max_attempts=3, retry_pause=10)
    df = source.fetch(2024)

    assert len(df) == 2
    assert fake_endpoint.sleeps == [10, 20]


def test_nba_api_fetch_gives_up_with_fetch_error(fake_endpoint):
    fake_endpoint.failures = 5
    source = NbaApiGameLogSource(max_attempts=2, retry_pause=1)

    with pytest.raises(FetchError, match="after 2 attempts"):
        source.fetch(2024)
    assert len(fake_endpoint.calls) == 2


def test_nba_api_fetch_without_result_set_raises(fake_endpoint):
    fake_endpoint.frames = []
    with pytest.raises(FetchError, match="no result set"):
        NbaApiGameLogSource().fetch(2024)


def test_csv_source_filters_requested_season(tmp_path):
    older = _provider_frame().assign(SEASON_YEAR='2022-23')
    path = tmp_path / 'game_logs.csv'
    pd.concat([_provider_frame(), older]).to_csv(path, index=False)

    df = CsvGameLogSource(str(path)).fetch(2024)

    assert len(df) == 2
    assert set(df['season_year']) == {'2023-24'}
    assert df.index.tolist() == [0, 1]


def test_csv_source_missing_file_raises(tmp_path):
    with pytest.raises(FetchError, match="not found"):
        CsvGameLogSource(str(tmp_path / 'nope.csv')).fetch(2024)
