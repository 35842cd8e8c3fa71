"""Orchestrate one reconciliation run: state -> zone lookup -> transaction -> verification."""

from __future__ import annotations

import logging
from dataclasses import replace

from ns_delegation.auth import ServiceAccountKeyFile
from ns_delegation.config import AppConfig
from ns_delegation.convergence import wait_for_convergence
from ns_delegation.dns import get_dns_provider
from ns_delegation.dns.util import verification_domain
from ns_delegation.errors import ConvergenceTimeout, DelegationError
from ns_delegation.models import Action, DesiredState, ReconcileResult
from ns_delegation.reconcile import apply_delegation
from ns_delegation.state import read_nameservers

logger = logging.getLogger(__name__)


def run(config: AppConfig) -> ReconcileResult:
    """Reconcile the configured NS record and optionally wait for it to resolve.

    The service-account key exists on disk only for the duration of this
    call. Fatal errors come back as a failed result rather than an exception.
    A convergence timeout is reported with ``converged=False`` but does not
    fail the result, since the record change has already been committed.
    """
    try:
        with ServiceAccountKeyFile(config.service_account_key) as key_file:
            with get_dns_provider(key_file.path) as provider:
                nameservers = read_nameservers(config.bbl_state_dir, config.action, bbl_binary=config.bbl_binary)
                desired = DesiredState(
                    action=config.action,
                    record_name=config.record_set_name,
                    nameservers=nameservers,
                )
                current = provider.find_ns_record(config.zone_name, config.record_set_name)
                outcome = apply_delegation(provider, config.zone_name, desired, current, ttl=config.record_ttl)
    except DelegationError as exc:
        logger.error("DNS %s operation failed: %s", config.action.value, exc)
        return ReconcileResult(action=config.action, error=str(exc))

    logger.info("DNS %s operation completed successfully (%s)", config.action.value, outcome.value)
    result = ReconcileResult(action=config.action, outcome=outcome, nameservers=nameservers)

    if not (config.check_dns and config.action is Action.ADD):
        return result

    try:
        wait_for_convergence(
            verification_domain(config.record_set_name),
            timeout=config.dns_check_timeout,
            required_successes=config.required_successes,
        )
    except ConvergenceTimeout as exc:
        logger.warning("%s; the record change itself was committed", exc)
        return replace(result, converged=False)
    return replace(result, converged=True)
