import logging

import pytest

from resonance_optimizer.core.config import (
    DEFAULT_API_BASE_URL, OptimizerSettings, configure_logging,
)


def test_defaults():
    settings = OptimizerSettings.from_env({})
    assert settings.api_base_url == DEFAULT_API_BASE_URL
    assert settings.request_timeout == 30.0
    assert settings.on_solve_error == "fallback"
    assert settings.api_key is None


def test_from_env():
    settings = OptimizerSettings.from_env({
        "RESONANCE_API_BASE_URL": "https://srs.example.com/v1",
        "RESONANCE_API_KEY": "key",
        "RESONANCE_API_TOKEN": "token",
        "RESONANCE_API_TIMEOUT": "5",
        "OPTIMIZER_ON_SOLVE_ERROR": "Surface",
        "OPTIMIZER_PROGRESS_INTERVAL": "0.5",
        "OPTIMIZER_DEFAULT_SEED": "42",
        "OPTIMIZER_RESEED": "no",
        "OPTIMIZER_LOG_LEVEL": "debug",
    })
    assert settings.api_base_url == "https://srs.example.com/v1"
    assert settings.api_key == "key"
    assert settings.api_token == "token"
    assert settings.request_timeout == 5.0
    assert settings.on_solve_error == "surface"
    assert settings.progress_interval == 0.5
    assert settings.default_seed == 42
    assert settings.reseed_on_regenerate is False
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("env", [
    {"RESONANCE_API_TIMEOUT": "soon"},
    {"RESONANCE_API_TIMEOUT": "0"},
    {"OPTIMIZER_ON_SOLVE_ERROR": "ignore"},
    {"OPTIMIZER_RESEED": "maybe"},
    {"OPTIMIZER_DEFAULT_SEED": "1.5"},
    {"OPTIMIZER_LOG_LEVEL": "chatty"},
])
def test_invalid_env(env):
    with pytest.raises(ValueError):
        OptimizerSettings.from_env(env)


def test_configure_logging_sets_level():
    configure_logging("WARNING")
    assert logging.getLogger().level == logging.WARNING
    configure_logging("INFO")
