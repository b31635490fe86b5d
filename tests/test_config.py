from __future__ import annotations

from pathlib import Path
import sys
import threading

from pydantic import ValidationError
import pytest

from sheetbridge import BridgeConfig, Workbook, start
from sheetbridge import config as config_module
from sheetbridge import hooks


def test_from_env_reads_sheetbridge_variables(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("SHEETBRIDGE_LOG_LEVEL", "debug")
    monkeypatch.setenv("SHEETBRIDGE_LOG_FILE", str(tmp_path / "bridge.log"))
    monkeypatch.setenv("SHEETBRIDGE_SHEET_PREFIX", "Tab")
    monkeypatch.setenv("SHEETBRIDGE_FAULT_HOOK", "off")

    config = BridgeConfig.from_env()

    assert config.log_level == "DEBUG"
    assert config.log_file == tmp_path / "bridge.log"
    assert config.default_sheet_prefix == "Tab"
    assert config.install_fault_hook is False


def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SHEETBRIDGE_LOG_LEVEL",
        "SHEETBRIDGE_LOG_FILE",
        "SHEETBRIDGE_SHEET_PREFIX",
        "SHEETBRIDGE_FAULT_HOOK",
    ):
        monkeypatch.delenv(name, raising=False)

    config = BridgeConfig.from_env()

    assert config == BridgeConfig()
    assert config.log_level == "INFO"


def test_invalid_config_values_are_rejected() -> None:
    with pytest.raises(ValidationError, match="Unknown log level"):
        BridgeConfig(log_level="chatty")
    with pytest.raises(ValidationError, match="must not be blank"):
        BridgeConfig(default_sheet_prefix="  ")


def test_configured_prefix_names_new_sheets(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        config_module, "_active_config", BridgeConfig(default_sheet_prefix="Tab")
    )
    workbook = Workbook()
    workbook.add_worksheet()
    assert workbook.sheet_names() == ["Tab1"]


def test_start_installs_hooks_once(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[BridgeConfig] = []
    monkeypatch.setattr(hooks, "_installed", False)
    monkeypatch.setattr(hooks, "configure_logging", calls.append)
    monkeypatch.setattr(hooks.faulthandler, "enable", lambda: None)
    monkeypatch.setattr(hooks.faulthandler, "is_enabled", lambda: True)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    monkeypatch.setattr(config_module, "_active_config", BridgeConfig())
    previous = sys.excepthook

    config = BridgeConfig(log_level="WARNING")
    assert start(config) is True
    assert start(config) is False

    assert calls == [config]
    assert hooks.is_started()
    assert config_module.get_config() is config
    assert sys.excepthook is not previous


def test_start_without_fault_hook(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(hooks, "_installed", False)
    monkeypatch.setattr(hooks, "configure_logging", lambda config: None)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(config_module, "_active_config", BridgeConfig())
    previous = sys.excepthook

    assert start(BridgeConfig(install_fault_hook=False)) is True
    assert sys.excepthook is previous


def test_start_can_retry_after_a_failed_install(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(hooks, "_installed", False)
    monkeypatch.setattr(hooks, "configure_logging", lambda config: None)
    monkeypatch.setattr(hooks.faulthandler, "enable", lambda: None)
    monkeypatch.setattr(hooks.faulthandler, "is_enabled", lambda: True)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    monkeypatch.setattr(config_module, "_active_config", BridgeConfig())
    monkeypatch.delenv("SHEETBRIDGE_FAULT_HOOK", raising=False)
    monkeypatch.setenv("SHEETBRIDGE_LOG_LEVEL", "bogus")
    previous = sys.excepthook

    with pytest.raises(ValidationError, match="Unknown log level"):
        start()
    assert not hooks.is_started()

    monkeypatch.delenv("SHEETBRIDGE_LOG_LEVEL")
    assert start() is True
    assert hooks.is_started()
    assert sys.excepthook is not previous


def test_excepthook_logs_then_chains(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    seen: list[type[BaseException]] = []
    monkeypatch.setattr(sys, "excepthook", lambda exc_type, exc, tb: seen.append(exc_type))
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    monkeypatch.setattr(hooks.faulthandler, "is_enabled", lambda: True)

    hooks._install_fault_hook()
    error = RuntimeError("boom")
    sys.excepthook(RuntimeError, error, None)

    assert seen == [RuntimeError]
    assert "Uncaught exception" in caplog.text
