"""DNS provider factory — authenticate and build the Cloud DNS provider."""

from __future__ import annotations

from pathlib import Path

from ns_delegation.auth import GoogleCredentialsAuth
from ns_delegation.auth import load_service_account as _load_service_account
from ns_delegation.dns.base import DnsProvider
from ns_delegation.dns.cloud_dns import CloudDnsProvider


def get_dns_provider(key_path: Path) -> DnsProvider:
    """Authenticate with a service-account key file and return a Cloud DNS provider.

    The access token is fetched up front so bad credentials fail the run
    before any state is read or any zone is touched.

    Args:
        key_path: Path to the transient service-account key file.

    Returns:
        A CloudDnsProvider scoped to the key's project.
    """
    account = _load_service_account(key_path)
    auth = GoogleCredentialsAuth(account.credentials)
    auth.refresh()
    return CloudDnsProvider(project_id=account.project_id, auth=auth)
