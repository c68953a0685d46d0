"""
Runtime settings for the optimizer and its remote solving service.

Settings are read from environment variables by ``OptimizerSettings.from_env``;
every field can also be passed explicitly.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


# Log format shared by the CLI, the web app and the benchmarks
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

DEFAULT_API_BASE_URL = "http://localhost:8080/v1"

ON_SOLVE_ERROR_FALLBACK = "fallback"
ON_SOLVE_ERROR_SURFACE = "surface"
ON_SOLVE_ERROR_CHOICES = (ON_SOLVE_ERROR_FALLBACK, ON_SOLVE_ERROR_SURFACE)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_number(name: str, raw: str, kind):
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name} must be a {kind.__name__}, got {raw!r}") from None


@dataclass(frozen=True)
class OptimizerSettings:
    """Configuration for the orchestrator and the SRS client."""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_key: Optional[str] = None
    api_token: Optional[str] = None
    request_timeout: float = 30.0  # seconds

    # "fallback" substitutes a canned answer, "surface" re-raises the failure
    on_solve_error: str = ON_SOLVE_ERROR_FALLBACK

    progress_interval: float = 0.2  # seconds between cosmetic progress ticks
    default_seed: int = 12345
    reseed_on_regenerate: bool = True

    log_level: str = "INFO"

    def __post_init__(self):
        if self.on_solve_error not in ON_SOLVE_ERROR_CHOICES:
            raise ValueError(
                f"on_solve_error must be one of {ON_SOLVE_ERROR_CHOICES}, got {self.on_solve_error!r}"
            )
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.progress_interval <= 0:
            raise ValueError("progress_interval must be positive")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OptimizerSettings":
        """Build settings from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        kwargs = {}

        if env.get("RESONANCE_API_BASE_URL"):
            kwargs["api_base_url"] = env["RESONANCE_API_BASE_URL"]
        if env.get("RESONANCE_API_KEY"):
            kwargs["api_key"] = env["RESONANCE_API_KEY"]
        if env.get("RESONANCE_API_TOKEN"):
            kwargs["api_token"] = env["RESONANCE_API_TOKEN"]
        if env.get("RESONANCE_API_TIMEOUT"):
            kwargs["request_timeout"] = _parse_number(
                "RESONANCE_API_TIMEOUT", env["RESONANCE_API_TIMEOUT"], float)
        if env.get("OPTIMIZER_ON_SOLVE_ERROR"):
            kwargs["on_solve_error"] = env["OPTIMIZER_ON_SOLVE_ERROR"].strip().lower()
        if env.get("OPTIMIZER_PROGRESS_INTERVAL"):
            kwargs["progress_interval"] = _parse_number(
                "OPTIMIZER_PROGRESS_INTERVAL", env["OPTIMIZER_PROGRESS_INTERVAL"], float)
        if env.get("OPTIMIZER_DEFAULT_SEED"):
            kwargs["default_seed"] = _parse_number(
                "OPTIMIZER_DEFAULT_SEED", env["OPTIMIZER_DEFAULT_SEED"], int)
        if env.get("OPTIMIZER_RESEED"):
            kwargs["reseed_on_regenerate"] = _parse_bool("OPTIMIZER_RESEED", env["OPTIMIZER_RESEED"])
        if env.get("OPTIMIZER_LOG_LEVEL"):
            kwargs["log_level"] = env["OPTIMIZER_LOG_LEVEL"].strip().upper()

        return cls(**kwargs)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Set up root logging for the command-line and web entry points."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
