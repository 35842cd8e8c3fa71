"""Data classes passed between the reconciliation stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

NS_RECORD_TYPE = "NS"
DEFAULT_TTL = 300


class Action(str, Enum):
    ADD = "add"
    REMOVE = "remove"


class Outcome(str, Enum):
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    ADDED = "added"
    REPLACED = "replaced"


@dataclass(frozen=True)
class DelegationRecord:
    """An NS record set as stored in the zone."""

    name: str
    nameservers: tuple[str, ...]
    ttl: int = DEFAULT_TTL
    record_type: str = field(default=NS_RECORD_TYPE, init=False)


@dataclass(frozen=True)
class DesiredState:
    """What the zone should hold for ``record_name`` after the run."""

    action: Action
    record_name: str
    nameservers: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReconcileResult:
    """Output of one orchestrated run."""

    action: Action
    outcome: Outcome | None = None
    nameservers: tuple[str, ...] = ()
    converged: bool | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "outcome": self.outcome.value if self.outcome else None,
            "nameservers": list(self.nameservers),
            "converged": self.converged,
            "error": self.error,
        }
