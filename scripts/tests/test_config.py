#!/usr/bin/env python3
# scripts/tests/test_config.py

import json
import os
import sys

# Add the project root to the Python path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from rewards_viewer.config import DEFAULT_CONFIG, ENV_OVERRIDES, load_config, merge_config


def clear_env(monkeypatch):
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    config = load_config(dotenv_path=str(tmp_path / "missing.env"))
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_file_merged_over_defaults(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    config_file = tmp_path / "viewer.json"
    config_file.write_text(json.dumps({"rpc": {"url": "http://localhost:5050"}, "extra": 1}))

    config = load_config(str(config_file), dotenv_path=str(tmp_path / "missing.env"))

    assert config["rpc"] == {"url": "http://localhost:5050", "timeout": DEFAULT_CONFIG["rpc"]["timeout"]}
    assert config["extra"] == 1


def test_env_overrides(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    monkeypatch.setenv("STARKNET_RPC_URL", "http://env-node")
    monkeypatch.setenv("WEB_PORT", "9000")
    monkeypatch.setenv("RPC_TIMEOUT", "soon")

    config = load_config(dotenv_path=str(tmp_path / "missing.env"))

    assert config["rpc"]["url"] == "http://env-node"
    assert config["web"]["port"] == 9000
    assert config["rpc"]["timeout"] == DEFAULT_CONFIG["rpc"]["timeout"]


def test_dotenv_file_loaded(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_LEVEL=DEBUG\n")

    try:
        config = load_config(dotenv_path=str(env_file))
    finally:
        os.environ.pop("LOG_LEVEL", None)

    assert config["logging"]["level"] == "DEBUG"


def test_merge_config_does_not_mutate():
    base = {"a": {"b": 1, "c": 2}}
    merged = merge_config(base, {"a": {"b": 5}})
    assert merged == {"a": {"b": 5, "c": 2}}
    assert base == {"a": {"b": 1, "c": 2}}
