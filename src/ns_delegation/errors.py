"""Exception classes raised while reconciling a delegation record."""

from __future__ import annotations


class DelegationError(Exception):
    """Base class for failures that abort a reconciliation run."""


class ParameterError(DelegationError):
    """A required input is missing or malformed. Raised before any mutation."""


class AuthenticationFailed(DelegationError):
    """The service-account credentials could not be exchanged for a token."""


class StateError(DelegationError):
    """Infrastructure state could not provide the desired name servers."""


class StateUnavailable(StateError):
    """The state directory is missing, unreadable, or ``bbl`` failed on it."""


class StateEmpty(StateError):
    """An ``add`` was requested but the state lists no name servers."""


class ProviderQueryFailed(DelegationError):
    """Looking up the current record failed for a reason other than "not found"."""


class TransactionError(DelegationError):
    """A zone transaction could not be opened or committed."""


class TransactionOpenFailed(TransactionError):
    pass


class TransactionCommitFailed(TransactionError):
    pass


class NoNameServersForAdd(TransactionError):
    """An ``add`` reached the transaction engine with an empty name-server set."""


class ConvergenceTimeout(Exception):
    """DNS resolution did not converge before the deadline.

    Not a ``DelegationError``: by the time this is raised the record change
    has already been committed.
    """

    def __init__(self, domain: str, successes: int, required: int, attempts: int) -> None:
        super().__init__(
            f"DNS for {domain} did not converge: {successes}/{required} consecutive "
            f"successful checks after {attempts} attempt(s)"
        )
        self.domain = domain
        self.successes = successes
        self.required = required
        self.attempts = attempts
