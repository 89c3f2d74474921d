"""Tests for environment configuration and package logging setup."""

import logging

import pytest
from pydantic import ValidationError

from openrtb_compat.core.config import (
    LogSamplingConfig,
    get_log_level,
    get_log_sampling_config,
    get_pydantic_extra_mode,
)
from openrtb_compat.core.logging_config import SamplingFilter, setup_logging


class TestPydanticExtraMode:
    """extra policy follows ENVIRONMENT."""

    @pytest.mark.parametrize("environment", ["development", "dev", " Development "])
    def test_development_is_strict(self, monkeypatch, environment):
        monkeypatch.setenv("ENVIRONMENT", environment)
        assert get_pydantic_extra_mode() == "forbid"

    @pytest.mark.parametrize("environment", ["production", "staging", ""])
    def test_other_environments_pass_unknown_fields_through(self, monkeypatch, environment):
        monkeypatch.setenv("ENVIRONMENT", environment)
        assert get_pydantic_extra_mode() == "allow"

    def test_unset_passes_unknown_fields_through(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        assert get_pydantic_extra_mode() == "allow"


class TestLogSamplingConfig:
    """OPENRTB_COMPAT_LOG_SAMPLING_* parsing."""

    def test_defaults(self, monkeypatch):
        for name in ("ENABLED", "INITIAL", "THEREAFTER"):
            monkeypatch.delenv(f"OPENRTB_COMPAT_LOG_SAMPLING_{name}", raising=False)

        assert get_log_sampling_config() == LogSamplingConfig(enabled=False, initial=100, thereafter=100)

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENRTB_COMPAT_LOG_SAMPLING_ENABLED", "true")
        monkeypatch.setenv("OPENRTB_COMPAT_LOG_SAMPLING_INITIAL", "5")
        monkeypatch.setenv("OPENRTB_COMPAT_LOG_SAMPLING_THEREAFTER", "50")

        assert get_log_sampling_config() == LogSamplingConfig(enabled=True, initial=5, thereafter=50)

    def test_non_integer_rejected(self, monkeypatch):
        monkeypatch.setenv("OPENRTB_COMPAT_LOG_SAMPLING_INITIAL", "lots")

        with pytest.raises(ValueError, match="OPENRTB_COMPAT_LOG_SAMPLING_INITIAL must be an integer"):
            get_log_sampling_config()

    def test_zero_rejected(self):
        with pytest.raises(ValidationError):
            LogSamplingConfig(thereafter=0)

    def test_log_level(self, monkeypatch):
        monkeypatch.setenv("OPENRTB_COMPAT_LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"


def _record(msg: str = "Expanding pod", level: int = logging.DEBUG, lineno: int = 1) -> logging.LogRecord:
    return logging.LogRecord("openrtb_compat.test", level, __file__, lineno, msg, None, None)


class TestSamplingFilter:
    """First N per tick pass, then every Mth."""

    def test_initial_then_every_nth(self):
        sampler = SamplingFilter(initial=2, thereafter=3, clock=lambda: 0.0)

        passed = [sampler.filter(_record()) for _ in range(9)]

        # 1, 2 pass (initial); then counts 5 and 8 (every 3rd after the initial two)
        assert passed == [True, True, False, False, True, False, False, True, False]

    def test_new_tick_resets_counts(self):
        now = [0.0]
        sampler = SamplingFilter(initial=1, thereafter=100, clock=lambda: now[0])

        assert sampler.filter(_record()) is True
        assert sampler.filter(_record()) is False

        now[0] = 1.5
        assert sampler.filter(_record()) is True

    def test_interpolated_messages_share_a_bucket(self):
        sampler = SamplingFilter(initial=2, thereafter=1000, clock=lambda: 0.0)
        records = [
            _record(f"Downgrading request: RequestID={i}, NumberOfImp=1", level=logging.INFO, lineno=49)
            for i in range(50)
        ]

        passed = sum(sampler.filter(record) for record in records)

        assert passed == 2

    def test_call_sites_counted_separately(self):
        sampler = SamplingFilter(initial=1, thereafter=100, clock=lambda: 0.0)

        assert sampler.filter(_record(lineno=10)) is True
        assert sampler.filter(_record(lineno=20)) is True
        assert sampler.filter(_record(lineno=10)) is False

    def test_levels_counted_separately(self):
        sampler = SamplingFilter(initial=1, thereafter=100, clock=lambda: 0.0)

        assert sampler.filter(_record(level=logging.INFO)) is True
        assert sampler.filter(_record(level=logging.WARNING)) is True

    def test_past_windows_dropped(self):
        now = [0.0]
        sampler = SamplingFilter(initial=1, thereafter=100, clock=lambda: now[0])
        for lineno in range(100):
            sampler.filter(_record(lineno=lineno))

        now[0] = 5.0
        sampler.filter(_record(lineno=1))

        assert len(sampler._counts) == 1

    def test_filter_on_real_logger(self, isolated_package_logger, caplog):
        sampler = SamplingFilter(initial=1, thereafter=1000, clock=lambda: 0.0)
        logger = logging.getLogger("openrtb_compat.sampled")
        logger.addFilter(sampler)
        try:
            with caplog.at_level(logging.INFO, logger="openrtb_compat"):
                for request_id in range(10):
                    logger.info(f"RequestID={request_id}")
        finally:
            logger.removeFilter(sampler)

        assert [record.getMessage() for record in caplog.records] == ["RequestID=0"]


class TestSetupLogging:
    """setup_logging wiring on the package logger."""

    def test_installs_single_handler(self, isolated_package_logger):
        setup_logging(level="WARNING", sampling=LogSamplingConfig())
        setup_logging(level="INFO", sampling=LogSamplingConfig())

        assert len(isolated_package_logger.handlers) == 1
        assert isolated_package_logger.level == logging.INFO

    def test_sampling_filter_toggled(self, isolated_package_logger):
        setup_logging(level="INFO", sampling=LogSamplingConfig(enabled=True, initial=1, thereafter=10))
        handler = isolated_package_logger.handlers[0]
        assert [type(f) for f in handler.filters] == [SamplingFilter]

        setup_logging(level="INFO", sampling=LogSamplingConfig(enabled=False))
        assert handler.filters == []

    def test_reads_environment_by_default(self, isolated_package_logger, monkeypatch):
        monkeypatch.setenv("OPENRTB_COMPAT_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("OPENRTB_COMPAT_LOG_SAMPLING_ENABLED", "1")

        logger = setup_logging()

        assert logger.level == logging.ERROR
        assert any(isinstance(f, SamplingFilter) for f in logger.handlers[0].filters)
