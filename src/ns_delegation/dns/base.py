"""Abstract base classes for DNS providers and their zone transactions."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Self

from ns_delegation.errors import TransactionError
from ns_delegation.models import DelegationRecord

logger = logging.getLogger(__name__)


class Transaction(ABC):
    """A batch of record removals and additions committed to one zone as a unit.

    Use as a context manager. Leaving the block without a successful
    ``execute()`` aborts the transaction, so it is never left open. Abort is
    best-effort: a failing abort is logged and the original error propagates.
    """

    def __init__(self, zone: str) -> None:
        self.zone = zone
        self._deletions: list[DelegationRecord] = []
        self._additions: list[DelegationRecord] = []
        self.state = "open"

    @property
    def deletions(self) -> tuple[DelegationRecord, ...]:
        return tuple(self._deletions)

    @property
    def additions(self) -> tuple[DelegationRecord, ...]:
        return tuple(self._additions)

    def _check_open(self) -> None:
        if self.state != "open":
            raise TransactionError(f"Transaction on zone {self.zone} is already {self.state}")

    def remove(self, record: DelegationRecord) -> None:
        """Queue removal of ``record``; values must match what the zone holds."""
        self._check_open()
        self._deletions.append(record)

    def add(self, record: DelegationRecord) -> None:
        self._check_open()
        self._additions.append(record)

    def execute(self) -> None:
        """Commit all queued operations, removals before additions."""
        self._check_open()
        self._commit(self.deletions, self.additions)
        self.state = "committed"

    def abort(self) -> None:
        """Discard the queued operations without applying any of them."""
        if self.state != "open":
            return
        try:
            self._discard()
        finally:
            self._deletions.clear()
            self._additions.clear()
            self.state = "aborted"

    @abstractmethod
    def _commit(
        self,
        deletions: tuple[DelegationRecord, ...],
        additions: tuple[DelegationRecord, ...],
    ) -> None:
        """Apply the change atomically. Raise TransactionCommitFailed on failure."""

    def _discard(self) -> None:
        """Release provider-side transaction state. Override where there is any."""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.state != "open":
            return
        if exc_type is None:
            logger.warning("Transaction on zone %s was not executed, aborting", self.zone)
        else:
            logger.info("Aborting DNS transaction on zone %s", self.zone)
        try:
            self.abort()
        except Exception:
            logger.exception("Failed to abort DNS transaction on zone %s", self.zone)


class DnsProvider(ABC):
    """Interface for DNS providers that manage delegation (NS) records."""

    def close(self) -> None:
        """Release resources. Override in subclasses that hold open connections."""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @abstractmethod
    def find_ns_record(self, zone: str, record_name: str) -> DelegationRecord | None:
        """Return the NS record set called ``record_name``, or None when absent.

        Args:
            zone: Provider zone identifier (e.g. "example-zone").
            record_name: Record name within the zone (e.g. "env.example.com.").

        Raises:
            ProviderQueryFailed: the lookup failed for any other reason.
        """

    @abstractmethod
    def transaction(self, zone: str) -> Transaction:
        """Open a transaction scoped to ``zone``.

        Raises:
            TransactionOpenFailed: the zone cannot be used for a transaction.
        """
