"""Unit tests for loguru logging setup."""

import json
import logging
from pathlib import Path

from loguru import logger

from merchcore.runtime.config.config_data import ConfigData, LoggingConfig
from merchcore.runtime.logging import configure_logging


class TestConfigureLogging:
    """Sinks and stdlib interception."""

    def test_json_file_sink(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "merchcore.log"
        config = ConfigData(logging=LoggingConfig(level="INFO", format="json", file=str(log_file)))

        configure_logging(config)
        logger.info("inventory updated")
        logger.complete()
        logger.remove()

        records = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert any(record["record"]["message"] == "inventory updated" for record in records)

    def test_stdlib_records_are_intercepted(self, tmp_path: Path):
        log_file = tmp_path / "plain.log"
        configure_logging(ConfigData(logging=LoggingConfig(level="DEBUG", file=str(log_file))))

        logging.getLogger("merchcore.test").warning("from stdlib")
        logger.complete()
        logger.remove()

        assert "from stdlib" in log_file.read_text()

    def test_sqlalchemy_noise_is_reduced(self):
        configure_logging(ConfigData())
        logger.remove()

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
