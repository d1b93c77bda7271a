"""
Configuration module for code-signature.

Centralizes settings read from the environment.
"""

import os
from typing import Optional

from .markers import DEFAULT_PREFIX

# ============================================================
# Environment Configuration
# ============================================================

MNEMONIC_ENV = "MNEMONIC"

# Marker prefix used when --prefix is not given
PREFIX = os.getenv("CODE_SIGNATURE_PREFIX", DEFAULT_PREFIX)

# Logging
LOG_LEVEL = os.getenv("CODE_SIGNATURE_LOG_LEVEL", "WARNING")
LOG_FILE = os.getenv("CODE_SIGNATURE_LOG_FILE", "")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


# ============================================================
# Accessors
# ============================================================

def get_mnemonic() -> Optional[str]:
    """
    Read the signing mnemonic from the environment.

    Read at call time, never cached, never logged. An empty value counts
    as unset.
    """
    return os.getenv(MNEMONIC_ENV) or None


def log_json() -> bool:
    """Check if JSON structured logs are requested."""
    return _flag("CODE_SIGNATURE_LOG_JSON")


# ============================================================
# Feature Flags
# ============================================================

def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return _flag("CODE_SIGNATURE_DEBUG")


def effective_log_level(override: Optional[str] = None) -> str:
    """Resolve the log level from a CLI override, debug flag, or environment."""
    if override:
        return override.upper()
    if is_debug():
        return "DEBUG"
    level = LOG_LEVEL.upper()
    return level if level in LOG_LEVELS else "WARNING"
