import sys

import pytest
import yaml
from loguru import logger

from webquery import common
from webquery.config_loader import ConfigLoader


@pytest.fixture
def log_file(tmp_path, monkeypatch):
    path = tmp_path / "logs" / "webquery.log"
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({"logging": {"level": "debug", "file": str(path)}}),
        encoding="utf-8",
    )
    monkeypatch.delenv("LOGGING_LEVEL", raising=False)
    monkeypatch.delenv("LOGGING_FILE", raising=False)
    monkeypatch.setattr(common, "_logger_initialized", False)
    ConfigLoader(config_path=config_path)

    yield path

    logger.remove()
    logger.add(sys.stderr)


def test_file_sink_from_config(log_file):
    common.init_logger()
    logger.debug("query finished")

    assert "query finished" in log_file.read_text(encoding="utf-8")


def test_init_is_idempotent(log_file):
    common.init_logger()
    common.init_logger(level="ERROR")
    logger.info("page loaded")

    assert log_file.read_text(encoding="utf-8").count("page loaded") == 1
    assert common.get_logger() is logger
