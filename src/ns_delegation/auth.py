"""Service-account credential handling for Google Cloud DNS."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path
from typing import Self

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from ns_delegation.errors import AuthenticationFailed, ParameterError

logger = logging.getLogger(__name__)

CLOUD_DNS_SCOPE = "https://www.googleapis.com/auth/ndev.clouddns.readwrite"
_KEY_FILE_PREFIX = "gcp_dns_service_account_"


class ServiceAccountKeyFile:
    """Transient on-disk copy of a service-account key.

    The key is written on ``__enter__`` to a file only the current user can
    read, and removed again on ``__exit__`` whatever the exit path.
    """

    def __init__(self, key_json: str, directory: str | None = None) -> None:
        self._key_json = key_json
        self._directory = directory
        self.path: Path | None = None

    def __enter__(self) -> Self:
        fd, name = tempfile.mkstemp(prefix=_KEY_FILE_PREFIX, suffix=".json", dir=self._directory)
        self.path = Path(name)
        try:
            with os.fdopen(fd, "w") as fh:
                fh.write(self._key_json)
        except BaseException:
            self.erase()
            raise
        return self

    def __exit__(self, *exc: object) -> None:
        self.erase()

    def erase(self) -> None:
        if self.path is not None:
            self.path.unlink(missing_ok=True)
            self.path = None


@dataclass(frozen=True)
class ServiceAccount:
    """Credentials plus the identity fields read from the key file."""

    credentials: service_account.Credentials
    client_email: str
    project_id: str


def load_service_account(key_path: Path) -> ServiceAccount:
    """Load Cloud DNS credentials from a service-account key file.

    Raises:
        ParameterError: the file is not a usable service-account key.
    """
    try:
        info = json.loads(key_path.read_text())
    except json.JSONDecodeError as exc:
        raise ParameterError(f"GCP_DNS_SERVICE_ACCOUNT_KEY is not valid JSON: {exc.msg}")
    if not isinstance(info, dict):
        raise ParameterError("GCP_DNS_SERVICE_ACCOUNT_KEY must be a JSON object")

    missing = [k for k in ("client_email", "project_id") if not info.get(k)]
    if missing:
        raise ParameterError(f"GCP_DNS_SERVICE_ACCOUNT_KEY is missing {', '.join(missing)}")

    try:
        credentials = service_account.Credentials.from_service_account_file(
            str(key_path), scopes=[CLOUD_DNS_SCOPE]
        )
    except (ValueError, GoogleAuthError) as exc:
        raise ParameterError(f"GCP_DNS_SERVICE_ACCOUNT_KEY is not a usable service account key: {exc}")

    logger.info("Authenticating with GCP as %s", info["client_email"])
    return ServiceAccount(
        credentials=credentials,
        client_email=info["client_email"],
        project_id=info["project_id"],
    )


class GoogleCredentialsAuth(httpx.Auth):
    """httpx auth flow attaching a bearer token from Google credentials."""

    def __init__(self, credentials, _request: Request | None = None) -> None:
        self._credentials = credentials
        self._request = _request

    def refresh(self) -> None:
        """Fetch a fresh access token.

        Raises:
            AuthenticationFailed: the token endpoint rejected the credentials.
        """
        try:
            self._credentials.refresh(self._request or Request())
        except GoogleAuthError as exc:
            raise AuthenticationFailed(f"Could not obtain a GCP access token: {exc}") from exc

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if not self._credentials.valid:
            self.refresh()
        request.headers["Authorization"] = f"Bearer {self._credentials.token}"
        yield request
