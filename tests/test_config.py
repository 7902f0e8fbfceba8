# test_config.py

import json
import logging
import os

import pytest

import logger_setup
from config import DEFAULT_SIMULATION_CONFIG, ConfigurationError, load_config, simulation_config


def _write_config(path, **overrides):
    config = {
        "run_id": "test_run",
        "master_seed": 3,
        "logging": {"level": "DEBUG", "format": "%(levelname)s - %(message)s"},
    }
    config.update(overrides)
    path.write_text(json.dumps(config))
    return path


def test_missing_simulation_section_uses_defaults(tmp_path):
    config = load_config(_write_config(tmp_path / "config.json"))

    assert config["master_seed"] == 3
    assert config["simulation"] == DEFAULT_SIMULATION_CONFIG


def test_nested_overrides_keep_sibling_defaults(tmp_path):
    path = _write_config(tmp_path / "config.json", simulation={"particle_count": 10, "coulomb": {"cutoff": 5.0}})

    sim = load_config(path)["simulation"]

    assert sim["particle_count"] == 10
    assert sim["coulomb"]["cutoff"] == 5.0
    assert sim["coulomb"]["k"] == DEFAULT_SIMULATION_CONFIG["coulomb"]["k"]
    assert sim["substeps"] == 20


def test_missing_required_keys_are_reported(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"master_seed": 1}))

    with pytest.raises(ConfigurationError, match="run_id"):
        load_config(path)


def test_simulation_config_does_not_mutate_defaults():
    sim = simulation_config({"impulse": {"restitution": 0.5}})
    sim["coulomb"]["k"] = 1.0

    assert DEFAULT_SIMULATION_CONFIG["impulse"]["restitution"] == 1.0
    assert DEFAULT_SIMULATION_CONFIG["coulomb"]["k"] != 1.0


def test_repository_config_loads():
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    config = load_config(os.path.join(root, "config.json"))

    assert config["simulation"]["interaction_law"] in ("impulse", "coulomb")
    assert config["simulation"]["substeps"] >= 1


def test_setup_logging_writes_to_the_run_directory(tmp_path, monkeypatch):
    _write_config(tmp_path / "config.json")
    monkeypatch.chdir(tmp_path)
    logger = logging.getLogger("demon_sim")
    original_level, original_propagate = logger.level, logger.propagate

    try:
        configured = logger_setup.setup_logging()

        assert configured is logger
        assert logger.propagate is False
        assert len(logger.handlers) == 2
        log_file = tmp_path / "runs" / "test_run" / "simulation.log"
        assert log_file.exists()
        for handler in logger.handlers:
            handler.flush()
        assert "Logging initialized" in log_file.read_text()
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(original_level)
        logger.propagate = original_propagate


def test_logging_section_defaults_are_filled_in(tmp_path):
    config = load_config(_write_config(tmp_path / "config.json"))

    assert config["logging"]["level"] == "DEBUG"
    assert config["logging"]["log_dir"] == "runs"
    assert config["logging"]["file_name"] == "simulation.log"
    assert config["logging"]["console"] is True


def test_setup_logging_honors_directory_file_name_and_console_flag(tmp_path, monkeypatch):
    _write_config(
        tmp_path / "config.json",
        logging={
            "level": "INFO",
            "format": "%(message)s",
            "log_dir": "logs",
            "file_name": "demon.log",
            "console": False,
        },
    )
    monkeypatch.chdir(tmp_path)
    logger = logging.getLogger("demon_sim")
    original_level, original_propagate = logger.level, logger.propagate

    try:
        logger_setup.setup_logging()

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.FileHandler)
        log_file = tmp_path / "logs" / "test_run" / "demon.log"
        assert log_file.exists()
        assert not (tmp_path / "runs").exists()
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(original_level)
        logger.propagate = original_propagate
