"""Google Cloud DNS provider — look up and change NS record sets via the Cloud DNS REST API."""

from __future__ import annotations

import logging

import httpx

from ns_delegation.dns.base import DnsProvider, Transaction
from ns_delegation.dns.util import to_fqdn
from ns_delegation.errors import ProviderQueryFailed, TransactionCommitFailed, TransactionOpenFailed
from ns_delegation.models import DEFAULT_TTL, NS_RECORD_TYPE, DelegationRecord

logger = logging.getLogger(__name__)

_API_BASE = "https://dns.googleapis.com/dns/v1"


def _to_rrset(record: DelegationRecord) -> dict:
    return {
        "name": to_fqdn(record.name),
        "type": record.record_type,
        "ttl": record.ttl,
        "rrdatas": [to_fqdn(ns) for ns in record.nameservers],
    }


def _from_rrset(data: dict) -> DelegationRecord:
    return DelegationRecord(
        name=data["name"],
        nameservers=tuple(data.get("rrdatas", [])),
        ttl=int(data.get("ttl", DEFAULT_TTL)),
    )


def _describe(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}: {exc.response.text}"
    return str(exc) or type(exc).__name__


class CloudDnsTransaction(Transaction):
    """Queued changes submitted as a single Cloud DNS ``Change``.

    Nothing reaches Cloud DNS until execute, and a Change is applied
    atomically by the service, so aborting only drops the local queue.
    """

    def __init__(self, provider: CloudDnsProvider, zone: str) -> None:
        super().__init__(zone)
        self._provider = provider
        self.change_id: str | None = None

    def _commit(self, deletions, additions) -> None:
        body = {
            "deletions": [_to_rrset(r) for r in deletions],
            "additions": [_to_rrset(r) for r in additions],
        }
        try:
            resp = self._provider.client.post(f"{self._provider.zone_url(self.zone)}/changes", json=body)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransactionCommitFailed(
                f"Cloud DNS rejected change to zone {self.zone}: {_describe(exc)}"
            ) from exc
        try:
            change = resp.json()
        except ValueError:
            # The change was accepted; only its description is unreadable.
            logger.warning("Change to zone %s accepted but response body was not JSON", self.zone)
            return
        self.change_id = change.get("id")
        logger.info(
            "Submitted change %s to zone %s (status %s)", self.change_id, self.zone, change.get("status", "unknown")
        )


class CloudDnsProvider(DnsProvider):
    """DNS provider backed by Google Cloud DNS managed zones."""

    def __init__(
        self,
        project_id: str,
        auth: httpx.Auth | None = None,
        _http_client: httpx.Client | None = None,
    ) -> None:
        self._project_id = project_id
        self.client = _http_client or httpx.Client(auth=auth, timeout=30)

    def zone_url(self, zone: str) -> str:
        return f"{_API_BASE}/projects/{self._project_id}/managedZones/{zone}"

    def find_ns_record(self, zone: str, record_name: str) -> DelegationRecord | None:
        fqdn = to_fqdn(record_name)
        try:
            resp = self.client.get(
                f"{self.zone_url(zone)}/rrsets",
                params={"name": fqdn, "type": NS_RECORD_TYPE},
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ProviderQueryFailed(
                f"Could not list record sets for {fqdn} in zone {zone}: {_describe(exc)}"
            ) from exc

        try:
            rrsets = resp.json().get("rrsets", [])
        except ValueError as exc:
            raise ProviderQueryFailed(f"Cloud DNS returned an unreadable record set list for {fqdn}: {exc}") from exc

        matches = [
            rrset
            for rrset in rrsets
            if rrset.get("type") == NS_RECORD_TYPE and rrset.get("name") and to_fqdn(rrset["name"]) == fqdn
        ]
        if not matches:
            logger.info("No NS record %s in zone %s", fqdn, zone)
            return None
        record = _from_rrset(matches[0])
        logger.info("Found NS record %s in zone %s: %s", fqdn, zone, ", ".join(record.nameservers))
        return record

    def transaction(self, zone: str) -> CloudDnsTransaction:
        try:
            self.client.get(self.zone_url(zone)).raise_for_status()
        except httpx.HTTPError as exc:
            raise TransactionOpenFailed(f"Cannot start transaction on zone {zone}: {_describe(exc)}") from exc
        logger.info("Starting DNS transaction on zone %s", zone)
        return CloudDnsTransaction(self, zone)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()
