"""Unit tests for decayclock.utils.logging_utils."""

from __future__ import annotations

import logging

from decayclock.utils.logging_utils import (
    configure_logging,
    get_logger,
    get_request_logger,
    new_request_id,
)


class TestLoggers:
    def test_namespacing(self):
        assert get_logger("pipeline").name == "decayclock.pipeline"
        assert get_logger("decayclock.pipeline").name == "decayclock.pipeline"

    def test_request_logger_prefixes_request_id(self):
        adapter = get_request_logger("pipeline", "abc12345")
        msg, kwargs = adapter.process("Researching", {})
        assert msg == "[abc12345] Researching"
        assert kwargs["extra"]["request_id"] == "abc12345"

    def test_platform_joins_the_prefix(self):
        adapter = get_request_logger("pipeline", "abc12345", platform="Twitter")
        msg, _ = adapter.process("2 of 2 providers returned usable research", {})
        assert msg == "[abc12345 Twitter] 2 of 2 providers returned usable research"
        assert adapter.platform == "Twitter"

    def test_missing_request_id_is_generated(self):
        adapter = get_request_logger("pipeline")
        assert len(adapter.request_id) == 8
        msg, _ = adapter.process("hello", {})
        assert msg == f"[{adapter.request_id}] hello"

    def test_caller_extra_is_kept(self):
        adapter = get_request_logger("pipeline", "abc12345")
        _, kwargs = adapter.process("hello", {"extra": {"provider": "OpenAI"}})
        assert kwargs["extra"] == {"provider": "OpenAI", "request_id": "abc12345", "platform": None}

    def test_request_ids_are_short_and_unique(self):
        ids = {new_request_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(len(i) == 8 for i in ids)


class TestConfigureLogging:
    def test_missing_yaml_falls_back_to_basic_config(self, tmp_path):
        configure_logging(config_path=str(tmp_path / "absent.yaml"), log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_yaml_config_applies_level_override(self, tmp_path):
        config_file = tmp_path / "logging.yaml"
        config_file.write_text(
            "version: 1\n"
            "disable_existing_loggers: false\n"
            "handlers:\n"
            "  console:\n"
            "    class: logging.StreamHandler\n"
            "loggers:\n"
            "  decayclock:\n"
            "    level: INFO\n"
            "    handlers: [console]\n",
            encoding="utf-8",
        )
        configure_logging(config_path=str(config_file), log_level="warning")
        assert logging.getLogger("decayclock").level == logging.WARNING
        assert logging.getLogger("openai").level == logging.WARNING
        logging.getLogger("decayclock").setLevel(logging.NOTSET)
