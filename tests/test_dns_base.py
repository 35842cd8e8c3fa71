"""Tests for the DnsProvider and Transaction base classes."""

import pytest

from ns_delegation.dns.base import DnsProvider, Transaction
from ns_delegation.errors import TransactionError
from ns_delegation.models import DelegationRecord


class RecordingTransaction(Transaction):
    def __init__(self, zone="z"):
        super().__init__(zone)
        self.committed = None
        self.discarded = False

    def _commit(self, deletions, additions):
        self.committed = (deletions, additions)

    def _discard(self):
        self.discarded = True


_RECORD = DelegationRecord(name="env.example.com.", nameservers=("a.ns.",))


def test_cannot_instantiate_abc():
    with pytest.raises(TypeError, match="abstract"):
        DnsProvider()


def test_concrete_subclass_works():
    class FakeProvider(DnsProvider):
        def find_ns_record(self, zone, record_name):
            return None

        def transaction(self, zone):
            return RecordingTransaction(zone)

    provider = FakeProvider()
    assert isinstance(provider, DnsProvider)


def test_record_type_is_fixed_to_ns():
    assert _RECORD.record_type == "NS"
    with pytest.raises(TypeError):
        DelegationRecord(name="x.", nameservers=("a.",), record_type="A")


class TestTransaction:
    def test_commit_passes_removals_and_additions_separately(self):
        txn = RecordingTransaction()
        txn.add(_RECORD)
        txn.remove(_RECORD)
        txn.execute()

        assert txn.committed == ((_RECORD,), (_RECORD,))
        assert txn.state == "committed"

    def test_exception_in_block_aborts(self):
        with pytest.raises(RuntimeError):
            with RecordingTransaction() as txn:
                txn.add(_RECORD)
                raise RuntimeError("interrupted")

        assert txn.state == "aborted"
        assert txn.discarded
        assert txn.committed is None

    def test_keyboard_interrupt_aborts(self):
        with pytest.raises(KeyboardInterrupt):
            with RecordingTransaction() as txn:
                raise KeyboardInterrupt

        assert txn.state == "aborted"

    def test_leaving_block_without_execute_aborts(self, caplog):
        with RecordingTransaction() as txn:
            txn.add(_RECORD)

        assert txn.state == "aborted"
        assert "was not executed" in caplog.text

    def test_committed_transaction_is_not_aborted(self):
        with RecordingTransaction() as txn:
            txn.execute()

        assert txn.state == "committed"
        assert not txn.discarded

    def test_cannot_queue_after_commit(self):
        txn = RecordingTransaction()
        txn.execute()

        with pytest.raises(TransactionError, match="already committed"):
            txn.add(_RECORD)
