"""Tests for ccportal logging utilities."""

from __future__ import annotations

import http.client
import json
import logging


from ccportal.logging import add_log_level, configure_logging, enable_network_debug, get_logger


class TestAddLogLevel:
    def test_sets_level_from_method(self) -> None:
        assert add_log_level(None, "info", {})["level"] == "info"

    def test_translates_warn(self) -> None:
        assert add_log_level(None, "warn", {})["level"] == "warning"


class TestConfigureLogging:
    def test_json_output_goes_to_stderr(self, capsys) -> None:
        configure_logging(level="INFO", json_output=True)
        get_logger("test").info("login_step", step=2)

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip())
        assert record["event"] == "login_step"
        assert record["step"] == 2
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filters_lower_events(self, capsys) -> None:
        configure_logging(level="WARNING", json_output=True)
        get_logger("test").info("quiet")
        get_logger("test").warning("loud")
        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "loud" in err

    def test_console_output(self, capsys) -> None:
        configure_logging(level="DEBUG", json_output=False)
        get_logger("test").debug("url_resolved", resolved="https://portal.example.com/")
        assert "url_resolved" in capsys.readouterr().err

    def test_unknown_level_falls_back_to_info(self, capsys) -> None:
        configure_logging(level="CHATTY", json_output=True)
        get_logger("test").debug("hidden")
        get_logger("test").info("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err


class TestNetworkDebug:
    def test_enables_wire_logging(self) -> None:
        original = http.client.HTTPConnection.debuglevel
        try:
            enable_network_debug()
            assert http.client.HTTPConnection.debuglevel == 1
            assert logging.getLogger("urllib3").level == logging.DEBUG
        finally:
            http.client.HTTPConnection.debuglevel = original
            logging.getLogger("urllib3").setLevel(logging.NOTSET)


def test_get_logger_binds_context(capsys) -> None:
    configure_logging(level="INFO", json_output=True)
    get_logger("test").bind(subscription="abc").info("bound")
    assert json.loads(capsys.readouterr().err.strip())["subscription"] == "abc"
