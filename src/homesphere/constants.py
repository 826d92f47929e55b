"""Application-wide constants for homesphere.

Constants that define client behavior.
For user-configurable settings per installation, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    "USER_AGENT",
    # Config location
    "CONFIG_DIR",
    "CONFIG_FILENAME",
    "API_URL_ENV_VAR",
    # Remote API
    "DEFAULT_API_BASE_URL",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "MIN_HTTP_TIMEOUT_SECONDS",
    "MAX_HTTP_TIMEOUT_SECONDS",
    "READ_RETRY_MAX_ATTEMPTS",
    "READ_RETRY_INITIAL_DELAY",
    "READ_RETRY_BACKOFF_MULTIPLIER",
    # Durable storage
    "TOKEN_STORAGE_KEY",
    "USER_STORAGE_KEY",
    "KEYRING_SERVICE",
    "ENCRYPTED_STORE_FILENAME",
    # Form validation
    "MIN_PASSWORD_LENGTH",
    "MIN_REVIEW_COMMENT_LENGTH",
    "MIN_RATING",
    "MAX_RATING",
]

import os

from platformdirs import user_config_dir

from homesphere import __version__

# ============================================================================
# Application Identity
# ============================================================================

APP_NAME: str = "homesphere"

USER_AGENT: str = f"{APP_NAME}/{__version__}"

# ============================================================================
# Configuration Location
# ============================================================================

# Platform-specific paths:
# - macOS: ~/Library/Application Support/homesphere/
# - Linux: ~/.config/homesphere/
# - Windows: %APPDATA%\homesphere\
CONFIG_DIR: str = os.path.realpath(user_config_dir(APP_NAME))

CONFIG_FILENAME: str = "config.json"

# Overrides api.base_url from the config file when set
API_URL_ENV_VAR: str = "HOMESPHERE_API_URL"

# ============================================================================
# Remote API
# ============================================================================

DEFAULT_API_BASE_URL: str = "http://localhost:3000"

# Applies to connect, read, write and pool acquisition alike
DEFAULT_HTTP_TIMEOUT_SECONDS: float = 20.0

MIN_HTTP_TIMEOUT_SECONDS: float = 1.0
MAX_HTTP_TIMEOUT_SECONDS: float = 120.0

# Caller-driven retries for idempotent reads only (writes are never retried)
# 3 attempts: immediate → wait 0.5s → retry → wait 1s → retry → fail
READ_RETRY_MAX_ATTEMPTS: int = 3
READ_RETRY_INITIAL_DELAY: float = 0.5
READ_RETRY_BACKOFF_MULTIPLIER: float = 2.0

# ============================================================================
# Durable Storage
# ============================================================================

# The session is persisted as exactly two keys, written and cleared together
TOKEN_STORAGE_KEY: str = "token"
USER_STORAGE_KEY: str = "user"

KEYRING_SERVICE: str = APP_NAME

# Fallback store when no keyring backend is usable
ENCRYPTED_STORE_FILENAME: str = "session.enc"

# ============================================================================
# Form Validation
# ============================================================================

MIN_PASSWORD_LENGTH: int = 6
MIN_REVIEW_COMMENT_LENGTH: int = 10
MIN_RATING: int = 1
MAX_RATING: int = 5
