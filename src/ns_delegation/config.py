"""Configuration loading and validation from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ns_delegation.errors import ParameterError
from ns_delegation.models import DEFAULT_TTL, Action

_DEFAULT_REQUIRED_SUCCESSES = 3
_DEFAULT_BBL_BINARY = "bbl"
_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no", ""}

_REQUIRED_VARS = (
    "ACTION",
    "BBL_STATE_DIR",
    "GCP_DNS_SERVICE_ACCOUNT_KEY",
    "GCP_DNS_ZONE_NAME",
    "GCP_DNS_RECORD_SET_NAME",
)


@dataclass(frozen=True)
class AppConfig:
    """Run configuration loaded from environment variables."""

    action: Action
    bbl_state_dir: str
    service_account_key: str
    zone_name: str
    record_set_name: str
    record_ttl: int = DEFAULT_TTL
    check_dns: bool = False
    required_successes: int = _DEFAULT_REQUIRED_SUCCESSES
    dns_check_timeout: float | None = None
    bbl_binary: str = _DEFAULT_BBL_BINARY

    def __repr__(self) -> str:
        # Keep the service account key out of logs and tracebacks.
        return (
            f"AppConfig(action={self.action.value!r}, bbl_state_dir={self.bbl_state_dir!r}, "
            f"zone_name={self.zone_name!r}, record_set_name={self.record_set_name!r}, "
            f"record_ttl={self.record_ttl}, check_dns={self.check_dns}, "
            f"required_successes={self.required_successes}, dns_check_timeout={self.dns_check_timeout})"
        )


def _positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise ParameterError(f"{name} must be an integer, got: {raw!r}")
    if value < 1:
        raise ParameterError(f"{name} must be a positive integer, got: {value}")
    return value


def _flag(name: str) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ParameterError(f"{name} must be true or false, got: {raw!r}")


def _optional_seconds(name: str) -> float | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ParameterError(f"{name} must be a number of seconds, got: {raw!r}")
    if value <= 0:
        raise ParameterError(f"{name} must be positive, got: {raw!r}")
    return value


def load_config() -> AppConfig:
    """Load and validate run configuration from environment variables."""
    missing = [name for name in _REQUIRED_VARS if not os.environ.get(name)]
    if missing:
        raise ParameterError(f"Missing required parameters: {', '.join(missing)}")

    raw_action = os.environ["ACTION"].strip().lower()
    try:
        action = Action(raw_action)
    except ValueError:
        raise ParameterError(f"ACTION must be 'add' or 'remove', got: {raw_action!r}")

    return AppConfig(
        action=action,
        bbl_state_dir=os.environ["BBL_STATE_DIR"],
        service_account_key=os.environ["GCP_DNS_SERVICE_ACCOUNT_KEY"],
        zone_name=os.environ["GCP_DNS_ZONE_NAME"],
        record_set_name=os.environ["GCP_DNS_RECORD_SET_NAME"],
        record_ttl=_positive_int("GCP_DNS_RECORD_TTL", DEFAULT_TTL),
        check_dns=_flag("CHECK_DNS"),
        required_successes=_positive_int("MAX_SUCCESS_COUNT", _DEFAULT_REQUIRED_SUCCESSES),
        dns_check_timeout=_optional_seconds("DNS_CHECK_TIMEOUT"),
        bbl_binary=os.environ.get("BBL_BINARY") or _DEFAULT_BBL_BINARY,
    )
