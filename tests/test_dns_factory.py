"""Tests for the DNS provider factory."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ns_delegation.dns import get_dns_provider
from ns_delegation.errors import AuthenticationFailed


class TestGetDnsProvider:
    @patch("ns_delegation.dns.CloudDnsProvider")
    @patch("ns_delegation.dns.GoogleCredentialsAuth")
    @patch("ns_delegation.dns._load_service_account")
    def test_returns_cloud_dns_provider_for_key_project(self, mock_load, mock_auth_cls, mock_provider_cls):
        mock_load.return_value = MagicMock(project_id="dns-project")

        provider = get_dns_provider(Path("/tmp/key.json"))

        mock_load.assert_called_once_with(Path("/tmp/key.json"))
        mock_auth_cls.assert_called_once_with(mock_load.return_value.credentials)
        mock_auth_cls.return_value.refresh.assert_called_once()
        mock_provider_cls.assert_called_once_with(project_id="dns-project", auth=mock_auth_cls.return_value)
        assert provider is mock_provider_cls.return_value

    @patch("ns_delegation.dns.CloudDnsProvider")
    @patch("ns_delegation.dns.GoogleCredentialsAuth")
    @patch("ns_delegation.dns._load_service_account")
    def test_authentication_failure_stops_before_provider(self, mock_load, mock_auth_cls, mock_provider_cls):
        mock_auth_cls.return_value.refresh.side_effect = AuthenticationFailed("denied")

        with pytest.raises(AuthenticationFailed):
            get_dns_provider(Path("/tmp/key.json"))

        mock_provider_cls.assert_not_called()
