from pathlib import Path

import pytest
from pydantic import ValidationError

from cadence.application.config import AppConfig, resolve_config


def test_defaults(mock_home):
    config = resolve_config()

    assert config.backend == "yaml"
    assert config.store_path == mock_home / ".config/cadence/reviews.yaml"
    assert config.initial_ease == 2.5
    assert config.min_ease == 1.3
    assert config.performance_window == 20
    assert config.max_queue_size == 50


def test_env_overrides(mock_home, monkeypatch):
    monkeypatch.setenv("CADENCE_BACKEND", "memory")
    monkeypatch.setenv("CADENCE_MIN_EASE", "1.5")

    config = resolve_config()

    assert config.backend == "memory"
    assert config.min_ease == 1.5


def test_toml_file(mock_home):
    cfg = mock_home / ".config/cadence/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text('backend = "memory"\nperformance_window = 5\n')

    config = resolve_config()

    assert config.backend == "memory"
    assert config.performance_window == 5


def test_env_beats_toml(mock_home, monkeypatch):
    cfg = mock_home / ".cadence.toml"
    cfg.write_text("performance_window = 5\n")
    monkeypatch.setenv("CADENCE_PERFORMANCE_WINDOW", "9")

    assert resolve_config().performance_window == 9


def test_cli_overrides_win_and_none_is_ignored(mock_home, monkeypatch, tmp_path):
    monkeypatch.setenv("CADENCE_BACKEND", "memory")

    config = resolve_config({"backend": "yaml", "store_path": tmp_path / "r.yaml", "port": None})

    assert config.backend == "yaml"
    assert config.store_path == tmp_path / "r.yaml"
    assert config.port == 8787


def test_store_path_expands_user(mock_home):
    config = resolve_config({"store_path": "~/data/reviews.yaml"})
    assert config.store_path == Path(mock_home) / "data/reviews.yaml"


def test_min_ease_cannot_exceed_initial(mock_home):
    with pytest.raises(ValidationError):
        AppConfig(min_ease=3.0, initial_ease=2.5)


def test_rejects_unknown_backend(mock_home):
    with pytest.raises(ValidationError):
        resolve_config({"backend": "postgres"})
