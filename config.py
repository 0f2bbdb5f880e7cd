"""
Configuration for the license expiration watcher.

Defaults live here as module constants; LicenseConfig is what the watcher
consumes. load_license_config() builds it from environment variables.
"""

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional


# ============================================================
# LICENSE SECRET
# ============================================================

DEFAULT_LICENSE_SECRET_NAME = "csm-op-license"
LICENSE_SECRET_KEY = "license"          # key inside the secret data map
DEFAULT_NAMESPACE = "default"

# Feature every valid license must grant
STREAMING_FEATURE = "K8S_STREAM_CCU"

# ============================================================
# EVENTS
# ============================================================

DEFAULT_DEPLOYMENT_NAME = "strimzi-cluster-operator"
EVENT_CONTROLLER = "strimzi.io/cluster-operator"
LICENSE_ANNOTATION_KEY = "csm/license-state"
EVENT_ACTION = "LicenseCheck"
EVENT_TYPE = "Warning"

# ============================================================
# SCHEDULING
# ============================================================

CHECK_INTERVAL_SECONDS = 600        # 10 minutes between checks
RETRY_ATTEMPTS = 3                  # secret reads per check when retrying
RETRY_DELAY_SECONDS = 3.0
STOP_TIMEOUT_SECONDS = 5.0


@dataclass
class LicenseConfig:
    """Watcher configuration."""
    namespace: str = DEFAULT_NAMESPACE
    secret_name: str = DEFAULT_LICENSE_SECRET_NAME
    deployment_name: str = DEFAULT_DEPLOYMENT_NAME
    required_feature: str = STREAMING_FEATURE
    check_interval: float = CHECK_INTERVAL_SECONDS
    retry_attempts: int = RETRY_ATTEMPTS
    retry_delay: float = RETRY_DELAY_SECONDS
    stop_timeout: float = STOP_TIMEOUT_SECONDS


def _non_empty_string(name: str, value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{name} must not be empty")
    return value


def _positive_number(name: str, value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")
    if number <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return number


# env var -> (LicenseConfig field, parser)
ENV_VARS: Dict[str, tuple] = {
    "LICENSE_NAMESPACE": ("namespace", _non_empty_string),
    "LICENSE_SECRET_NAME": ("secret_name", _non_empty_string),
    "LICENSE_DEPLOYMENT_NAME": ("deployment_name", _non_empty_string),
    "LICENSE_REQUIRED_FEATURE": ("required_feature", _non_empty_string),
    "LICENSE_CHECK_INTERVAL_SECONDS": ("check_interval", _positive_number),
}


def load_license_config(environ: Optional[Mapping[str, str]] = None) -> LicenseConfig:
    """
    Build LicenseConfig from environment variables.

    Only the variables listed in ENV_VARS are read; everything else keeps
    its default.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        LicenseConfig

    Raises:
        ValueError: A variable is present but invalid
    """
    if environ is None:
        environ = os.environ

    values = {}
    for env_name, (field_name, parser) in ENV_VARS.items():
        raw = environ.get(env_name)
        if raw is None:
            continue
        values[field_name] = parser(env_name, raw)

    return LicenseConfig(**values)
