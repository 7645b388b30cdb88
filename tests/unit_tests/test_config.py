"""
Environment settings and logger factories.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ringlog import ConsoleSink, FileSink, LoggerConfig, LogLevel, create_logger, create_logger_from_settings
from ringlog.config import EnvironmentSettings, LogFormat, LoggerSettings, Settings


class TestEnvironmentSettings:
    def test_defaults_to_production(self) -> None:
        settings = EnvironmentSettings()
        assert settings.env == "production"
        assert settings.default_min_level is LogLevel.WARN

    @pytest.mark.parametrize("env", ["development", "testing"])
    def test_development_like_environments_log_everything(self, monkeypatch, env) -> None:
        monkeypatch.setenv("RINGLOG_ENV", env)
        assert EnvironmentSettings().default_min_level is LogLevel.DEBUG

    def test_staging_is_quiet(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_ENV", "staging")
        assert EnvironmentSettings().default_min_level is LogLevel.WARN

    def test_rejects_unknown_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_ENV", "qa")
        with pytest.raises(ValidationError):
            EnvironmentSettings()

    def test_reads_dotenv(self, tmp_path) -> None:
        (tmp_path / ".env").write_text("RINGLOG_ENV=development\n")
        assert EnvironmentSettings().env == "development"


class TestLoggerSettings:
    def test_defaults(self) -> None:
        settings = LoggerSettings()
        assert settings.level is None
        assert settings.max_history == 200
        assert settings.format is LogFormat.TEXT
        assert settings.sink_names == ["console"]

    def test_level_aliases(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_LOG_LEVEL", "WARNING")
        assert LoggerSettings().level is LogLevel.WARN

    def test_sink_names(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_LOG_SINKS", " Console , file,")
        assert LoggerSettings().sink_names == ["console", "file"]

    def test_rejects_negative_history(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_LOG_MAX_HISTORY", "-1")
        with pytest.raises(ValidationError):
            LoggerSettings()


class TestCreateLogger:
    def test_environment_level_in_production(self) -> None:
        logger = create_logger(settings=Settings(), platform_info=False)
        assert logger.min_level is LogLevel.WARN

    def test_environment_level_in_development(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_ENV", "development")
        logger = create_logger(settings=Settings(), platform_info=False)
        assert logger.min_level is LogLevel.DEBUG

    def test_explicit_level_level_wins(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_LOG_LEVEL", "info")
        logger = create_logger(settings=Settings(), platform_info=False)
        assert logger.min_level is LogLevel.INFO

    def test_overrides(self) -> None:
        logger = create_logger(settings=Settings(), min_level="error", prefix="Svc", platform_info=False)
        assert logger.min_level is LogLevel.ERROR
        assert logger.prefix == "Svc"

    def test_config_without_level_uses_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_ENV", "production")
        logger = create_logger(LoggerConfig(prefix="App", platform_info=False), settings=Settings())
        assert logger.min_level is LogLevel.WARN
        assert logger.prefix == "App"

    def test_explicit_config(self) -> None:
        logger = create_logger(LoggerConfig(min_level=LogLevel.INFO, platform_info=False), settings=Settings())
        assert logger.min_level is LogLevel.INFO
        assert isinstance(logger.sinks[0], ConsoleSink)


class TestCreateLoggerFromSettings:
    @pytest.mark.asyncio
    async def test_console_and_file(self, monkeypatch, tmp_path) -> None:
        target = tmp_path / "logs" / "app.log"
        monkeypatch.setenv("RINGLOG_LOG_SINKS", "console,file")
        monkeypatch.setenv("RINGLOG_LOG_FORMAT", "json")
        monkeypatch.setenv("RINGLOG_LOG_FILE_PATH", str(target))
        monkeypatch.setenv("RINGLOG_LOG_LEVEL", "error")
        monkeypatch.setenv("RINGLOG_LOG_PLATFORM_INFO", "false")

        logger = create_logger_from_settings(Settings())
        console, file_sink = logger.sinks
        assert isinstance(console, ConsoleSink)
        assert isinstance(file_sink, FileSink)
        assert logger.min_level is LogLevel.ERROR
        assert logger.platform is None

        logger.error("persisted")
        logger.info("filtered")
        await logger.close()

        lines = target.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert '"message":"persisted"' in lines[0]

    def test_text_format_uses_prefix(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_LOG_PREFIX", "Svc")
        logger = create_logger_from_settings(Settings())
        assert logger.prefix == "Svc"
        assert [type(sink) for sink in logger.sinks] == [ConsoleSink]

    def test_unknown_sink(self, monkeypatch) -> None:
        monkeypatch.setenv("RINGLOG_LOG_SINKS", "console,gcloud")
        with pytest.raises(ValueError, match="gcloud"):
            create_logger_from_settings(Settings())
