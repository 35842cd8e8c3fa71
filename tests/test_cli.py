"""Tests for the command-line entry point."""

import signal
from unittest.mock import patch

import pytest

from ns_delegation.cli import EXIT_FAILED, EXIT_NOT_CONVERGED, EXIT_OK, _raise_system_exit, main
from ns_delegation.errors import ParameterError
from ns_delegation.models import Action, Outcome, ReconcileResult


@pytest.fixture(autouse=True)
def _restore_sigterm():
    previous = signal.getsignal(signal.SIGTERM)
    yield
    signal.signal(signal.SIGTERM, previous)


class TestMain:
    @patch("ns_delegation.cli.run")
    @patch("ns_delegation.cli.load_config")
    def test_success_exits_zero(self, mock_config, mock_run):
        mock_run.return_value = ReconcileResult(action=Action.REMOVE, outcome=Outcome.UNCHANGED)

        assert main() == EXIT_OK
        mock_run.assert_called_once_with(mock_config.return_value)

    @patch("ns_delegation.cli.run")
    @patch("ns_delegation.cli.load_config", side_effect=ParameterError("Missing required parameters: ACTION"))
    def test_missing_parameters_exit_non_zero_without_running(self, mock_config, mock_run, caplog):
        assert main() == EXIT_FAILED
        mock_run.assert_not_called()
        assert "Missing required parameters: ACTION" in caplog.text

    @patch("ns_delegation.cli.run")
    @patch("ns_delegation.cli.load_config")
    def test_failed_run_exits_one(self, mock_config, mock_run):
        mock_run.return_value = ReconcileResult(action=Action.ADD, error="HTTP 500")

        assert main() == EXIT_FAILED

    @patch("ns_delegation.cli.run")
    @patch("ns_delegation.cli.load_config")
    def test_not_converged_exits_two(self, mock_config, mock_run):
        mock_run.return_value = ReconcileResult(action=Action.ADD, outcome=Outcome.ADDED, converged=False)

        assert main() == EXIT_NOT_CONVERGED

    @patch(
        "ns_delegation.cli.run",
        return_value=ReconcileResult(action=Action.ADD, outcome=Outcome.ADDED, converged=True),
    )
    @patch("ns_delegation.cli.load_config")
    def test_installs_sigterm_handler(self, mock_config, mock_run):
        main()

        assert signal.getsignal(signal.SIGTERM) is _raise_system_exit


def test_sigterm_handler_raises_system_exit():
    with pytest.raises(SystemExit) as excinfo:
        _raise_system_exit(signal.SIGTERM, None)

    assert excinfo.value.code == 128 + signal.SIGTERM


@patch("ns_delegation.cli.run")
@patch("ns_delegation.cli.load_config")
def test_logs_result_summary(mock_config, mock_run, caplog):
    caplog.set_level("INFO", logger="ns_delegation.cli")
    mock_run.return_value = ReconcileResult(action=Action.ADD, outcome=Outcome.REPLACED, nameservers=("a.ns.",))

    main()

    assert '"outcome": "replaced"' in caplog.text
    assert '"nameservers": ["a.ns."]' in caplog.text
