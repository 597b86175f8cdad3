"""
profithub_config -- single public entrypoint for analytics configuration.

Responsibility:
    Provides the ONLY way to obtain policy constants at runtime through
    ``get_active_config()``.  No other component reads configuration files
    or environment variables.  Returns a frozen ``AnalyticsConfig``.

Architecture position:
    Configuration -- sits above ``profithub_kernel`` and
    ``profithub_engines`` and below ``profithub_modules``.  The kernel and
    engines MUST NEVER import from ``profithub_config``; ``bridges`` turns
    the config into configured engine instances.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``KeyError`` -- a required key is missing.
    - ``ValueError`` -- a value is out of range or inconsistent.

Every successful call emits a ``PROFITHUB_CONFIG_TRACE`` log entry with the
config id, version and checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from profithub_config.loader import compute_checksum, load_yaml_file, parse_analytics_config
from profithub_config.schema import AnalyticsConfig

_logger = logging.getLogger("profithub.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> AnalyticsConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a YAML configuration file.
            Defaults to profithub_config/sets/default.yaml.

    Raises:
        FileNotFoundError: If the file does not exist.
        KeyError: If a required key is missing.
        ValueError: If configuration validation fails.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_analytics_config(load_yaml_file(path))

    _logger.info(
        "PROFITHUB_CONFIG_TRACE",
        extra={
            "trace_type": "PROFITHUB_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "reporting_currency": config.reporting_currency,
        },
    )
    return config


__all__ = [
    "AnalyticsConfig",
    "DEFAULT_CONFIG_PATH",
    "compute_checksum",
    "get_active_config",
]
