"""DNS name helpers."""

from __future__ import annotations

_VERIFICATION_PREFIX = "pcf"


def to_fqdn(name: str) -> str:
    """Return ``name`` as an absolute domain name (with trailing dot).

    Cloud DNS stores record names and NS targets in absolute form, so both
    sides of a comparison must go through this.
    """
    name = name.strip()
    if not name:
        raise ValueError("Domain name must not be empty")
    return name if name.endswith(".") else f"{name}."


def verification_domain(record_name: str) -> str:
    """Domain whose resolution shows that the delegation for ``record_name`` is live.

    Args:
        record_name: Delegated record name (e.g. "env.example.com.").

    Returns:
        The name checked after an add, without trailing dot (e.g. "pcf.env.example.com").
    """
    return f"{_VERIFICATION_PREFIX}.{to_fqdn(record_name).rstrip('.')}"
