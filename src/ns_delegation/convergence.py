"""Wait until public DNS resolution reflects a newly published delegation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import dns.exception
import dns.resolver

from ns_delegation.errors import ConvergenceTimeout

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_SUCCESSES = 3
POLL_INTERVAL_SECONDS = 5.0
# Checking too early gets NXDOMAIN cached by the resolvers in between.
INITIAL_DELAY_SECONDS = 90.0


def host_resolves(domain: str, resolver: dns.resolver.Resolver | None = None) -> bool:
    """Return True if ``domain`` has an A, AAAA or MX answer right now, as ``host`` would."""
    resolver = resolver or dns.resolver.Resolver()
    for rdtype in ("A", "AAAA", "MX"):
        try:
            resolver.resolve(domain, rdtype)
            return True
        except dns.exception.DNSException as exc:
            logger.debug("%s lookup for %s failed: %s", rdtype, domain, exc)
    return False


@dataclass
class ConvergenceState:
    """Run of consecutive successful resolutions, reset by any failure."""

    required: int
    successes: int = 0

    @property
    def converged(self) -> bool:
        return self.successes >= self.required

    def record(self, resolved: bool) -> None:
        if resolved:
            self.successes += 1
        else:
            self.successes = 0


def wait_for_convergence(
    domain: str,
    *,
    timeout: float | None,
    required_successes: int = DEFAULT_REQUIRED_SUCCESSES,
    poll_interval: float = POLL_INTERVAL_SECONDS,
    initial_delay: float = INITIAL_DELAY_SECONDS,
    _resolve: Callable[[str], bool] = host_resolves,
    _sleep: Callable[[float], None] = time.sleep,
    _clock: Callable[[], float] = time.monotonic,
) -> int:
    """Poll ``domain`` until ``required_successes`` consecutive lookups succeed.

    Failed lookups are expected while caches expire; they reset the run of
    successes but do not end the wait. The check never changes DNS.

    Args:
        domain: Name to resolve (e.g. "pcf.env.example.com").
        timeout: Seconds allowed for the whole check, initial delay included.
            Pass None to wait with no deadline.
        required_successes: Consecutive successes needed.
        poll_interval: Pause between lookups.
        initial_delay: Pause before the first lookup.

    Returns:
        Number of lookups made.

    Raises:
        ConvergenceTimeout: the deadline passed before convergence.
    """
    if required_successes < 1:
        raise ValueError(f"required_successes must be at least 1, got: {required_successes}")

    deadline = None if timeout is None else _clock() + timeout
    state = ConvergenceState(required=required_successes)
    attempts = 0

    def pause(seconds: float) -> None:
        if deadline is not None:
            seconds = min(seconds, max(deadline - _clock(), 0.0))
        if seconds > 0:
            _sleep(seconds)

    logger.info("Waiting %d seconds before DNS verification to avoid NXDOMAIN caching...", initial_delay)
    pause(initial_delay)
    logger.info("Verifying DNS for domain: %s", domain)

    while True:
        if deadline is not None and _clock() >= deadline:
            raise ConvergenceTimeout(domain, state.successes, required_successes, attempts)

        attempts += 1
        resolved = _resolve(domain)
        state.record(resolved)
        if resolved:
            logger.info("DNS check %d/%d succeeded", state.successes, required_successes)
        else:
            logger.info("DNS check failed, resetting counter")

        if state.converged:
            logger.info("DNS verification completed successfully")
            return attempts
        pause(poll_interval)
