"""Apply a desired delegation to the zone in a single transaction."""

from __future__ import annotations

import logging

from ns_delegation.dns.base import DnsProvider
from ns_delegation.errors import NoNameServersForAdd
from ns_delegation.models import DEFAULT_TTL, Action, DelegationRecord, DesiredState, Outcome

logger = logging.getLogger(__name__)


def apply_delegation(
    provider: DnsProvider,
    zone: str,
    desired: DesiredState,
    current: DelegationRecord | None,
    ttl: int = DEFAULT_TTL,
) -> Outcome:
    """Bring the NS record in ``zone`` to ``desired``, given the ``current`` record.

    An existing record is always removed with the values it currently holds
    and an add always replaces it wholesale; overlapping name servers are not
    diffed. Removal is queued before addition in the same transaction. If
    the transaction fails after being opened it is aborted.

    Returns:
        Which of the four branches was taken.
    """
    if desired.action is Action.ADD and not desired.nameservers:
        raise NoNameServersForAdd(f"Refusing to add NS record {desired.record_name} with no name servers")

    if current is None:
        logger.info("DNS entry for %r not found in zone %r", desired.record_name, zone)
    elif not current.nameservers:
        # Deletions must list the stored values; there are none to list.
        logger.info("DNS entry for %r in zone %r holds no name servers", desired.record_name, zone)
        current = None

    if desired.action is Action.REMOVE and current is None:
        logger.info("Nothing to remove")
        return Outcome.UNCHANGED

    with provider.transaction(zone) as txn:
        if current is not None:
            logger.info("Removing existing DNS records...")
            txn.remove(current)
        if desired.action is Action.ADD:
            logger.info("Adding new DNS records...")
            txn.add(DelegationRecord(name=desired.record_name, nameservers=desired.nameservers, ttl=ttl))
        logger.info("Executing DNS transaction...")
        txn.execute()

    if desired.action is Action.REMOVE:
        return Outcome.REMOVED
    return Outcome.REPLACED if current is not None else Outcome.ADDED
