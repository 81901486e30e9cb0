# -*- coding: utf-8 -*-
"""
Provenance Registry Configuration

Centralized configuration for the provenance registry covering:
- The administrator principal (diagnostics and security-gate privileges)
- Audit ledger toggle
- Log level for the package logger
- HTTP API prefix and the header carrying the authenticated caller

All settings can be overridden via environment variables with the
``PROVENANCE_REGISTRY_`` prefix (e.g. ``PROVENANCE_REGISTRY_ADMINISTRATOR``).

Example:
    >>> from provenance_registry.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.administrator, cfg.enable_audit)

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Environment variable prefix
# ---------------------------------------------------------------------------

_ENV_PREFIX = "PROVENANCE_REGISTRY_"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# ProvenanceRegistryConfig
# ---------------------------------------------------------------------------


@dataclass
class ProvenanceRegistryConfig:
    """Complete configuration for the provenance registry.

    All attributes can be overridden via environment variables using the
    ``PROVENANCE_REGISTRY_`` prefix.

    Attributes:
        administrator: Principal identity holding administrator standing.
        enable_audit: Whether to append audit ledger entries on mutations.
        log_level: Python log level name for the package logger.
        api_prefix: URL prefix the HTTP router is mounted under.
        principal_header: Request header carrying the authenticated caller.
    """

    # -- Authority -----------------------------------------------------------
    administrator: str = "admin"

    # -- Auditing ------------------------------------------------------------
    enable_audit: bool = True

    # -- Logging -------------------------------------------------------------
    log_level: str = "INFO"

    # -- HTTP ----------------------------------------------------------------
    api_prefix: str = "/api/v1/provenance"
    principal_header: str = "X-Principal"

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> ProvenanceRegistryConfig:
        """Build a ProvenanceRegistryConfig from environment variables.

        Every field can be overridden via ``PROVENANCE_REGISTRY_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive).

        Returns:
            Populated ProvenanceRegistryConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None or not val.strip():
                return default
            return val.strip()

        log_level = _str("LOG_LEVEL", cls.log_level).upper()
        if log_level not in _VALID_LOG_LEVELS:
            logger.warning(
                "Invalid log level for %sLOG_LEVEL=%s, using default %s",
                prefix, log_level, cls.log_level,
            )
            log_level = cls.log_level

        config = cls(
            administrator=_str("ADMINISTRATOR", cls.administrator),
            enable_audit=_bool("ENABLE_AUDIT", cls.enable_audit),
            log_level=log_level,
            api_prefix=_str("API_PREFIX", cls.api_prefix),
            principal_header=_str("PRINCIPAL_HEADER", cls.principal_header),
        )

        logger.info(
            "ProvenanceRegistryConfig loaded: administrator=%s, audit=%s, "
            "log_level=%s, api_prefix=%s",
            config.administrator,
            config.enable_audit,
            config.log_level,
            config.api_prefix,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[ProvenanceRegistryConfig] = None
_config_lock = threading.Lock()


def get_config() -> ProvenanceRegistryConfig:
    """Return the singleton config, creating it from env if needed."""
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = ProvenanceRegistryConfig.from_env()
    return _config_instance


def set_config(config: ProvenanceRegistryConfig) -> None:
    """Replace the singleton config (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("ProvenanceRegistryConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "ProvenanceRegistryConfig",
    "get_config",
    "set_config",
    "reset_config",
]
