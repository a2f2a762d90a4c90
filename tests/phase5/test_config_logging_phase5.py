from __future__ import annotations

import logging

import pytest

import timeline_evals.evaluation.main as main_module
from timeline_evals.common.local_bind import LocalBindError, ensure_local_bind
from timeline_evals.common.log import configure_logging
from timeline_evals.evaluation.config import EvalConfig, load_eval_config


def test_config_defaults(monkeypatch):
    for name in (
        "EVALS_HOST",
        "EVALS_PORT",
        "EVALS_SCENARIOS_DIR",
        "EVALS_MAX_WORKERS",
        "EVALS_DEFAULT_TIMEOUT_MS",
        "EVALS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    assert load_eval_config() == EvalConfig()


def test_config_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("EVALS_PORT", "9100")
    monkeypatch.setenv("EVALS_SCENARIOS_DIR", str(tmp_path))
    monkeypatch.setenv("EVALS_MAX_WORKERS", "0")
    monkeypatch.setenv("EVALS_DEFAULT_TIMEOUT_MS", "30000")
    monkeypatch.setenv("EVALS_LOG_LEVEL", "debug")
    config = load_eval_config()
    assert config.port == 9100
    assert config.scenarios_dir == str(tmp_path)
    assert config.max_workers == 1
    assert config.default_timeout_ms == 30000
    assert config.log_level == "debug"


def test_configure_logging_sets_package_level():
    configure_logging("debug")
    assert logging.getLogger("timeline_evals").level == logging.DEBUG
    configure_logging("INFO")
    assert logging.getLogger("timeline_evals").level == logging.INFO


def test_local_bind_enforced(monkeypatch):
    ensure_local_bind("127.0.0.1")
    with pytest.raises(LocalBindError):
        ensure_local_bind("0.0.0.0")

    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda app, host, port: calls.append((host, port)))
    main_module.run(host="localhost", port=8123)
    assert calls == [("localhost", 8123)]
    with pytest.raises(LocalBindError):
        main_module.run(host="0.0.0.0")
    assert len(calls) == 1
