import logging

import pytest

import config
from config import ReportConfig, load_config
from logger_config import setup_logger

ENV_VARS = ['NBA_SEASON', 'TOP_N', 'SEASON_TYPE', 'OUTPUT_DIR', 'LOG_FILE',
            'API_TIMEOUT', 'MAX_ATTEMPTS', 'RETRY_PAUSE']


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, 'load_dotenv', lambda: False)
    return monkeypatch


def test_defaults(clean_env):
    assert load_config() == ReportConfig()


def test_environment_overrides(clean_env):
    clean_env.setenv('NBA_SEASON', '2019')
    clean_env.setenv('TOP_N', '5')
    clean_env.setenv('SEASON_TYPE', 'Playoffs')
    clean_env.setenv('RETRY_PAUSE', '')

    cfg = load_config()

    assert cfg.season == 2019
    assert cfg.top_n == 5
    assert cfg.season_type == 'Playoffs'
    assert cfg.retry_pause == config.DEFAULT_RETRY_PAUSE


def test_non_integer_value_names_the_variable(clean_env):
    clean_env.setenv('TOP_N', 'ten')
    with pytest.raises(ValueError, match="TOP_N"):
        load_config()


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logger_writes_to_file_without_duplicate_handlers(restore_root_logger, tmp_path):
    log_file = tmp_path / 'logs' / 'run.log'

    setup_logger(str(log_file))
    logger = setup_logger(str(log_file))
    logging.getLogger('scoring_breakdown').info("hello from the pipeline")

    assert len(logger.handlers) == 2
    for handler in logger.handlers:
        handler.flush()
    assert "INFO - test_config - hello from the pipeline" in log_file.read_text(encoding='utf-8')
    for handler in logger.handlers:
        handler.close()
