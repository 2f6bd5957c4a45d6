"""
Unit Tests for Pending Deployment Confirmation
"""

import threading
import pytest
from unittest.mock import Mock

from blockchain.confirmation import PendingDeployment
from blockchain.network import Network
from deployer.exceptions import (
    ConfirmationTimeoutError,
    DeploymentCancelledError,
    NetworkError,
    SubmissionError,
)

from conftest import CONTRACT_ADDRESS, TX_HASH


def receipt(status=1, contract_address=CONTRACT_ADDRESS, block=41):
    return {'status': status, 'contractAddress': contract_address, 'blockNumber': block}


@pytest.fixture
def network():
    return Mock(spec=Network)


@pytest.fixture
def pending(network):
    return PendingDeployment(network, TX_HASH, 'Project')


class TestWait:

    def test_polls_until_mined(self, pending, network):
        network.get_transaction_receipt.side_effect = [None, None, receipt()]

        address = pending.wait(poll_latency=0)

        assert address == CONTRACT_ADDRESS
        assert network.get_transaction_receipt.call_count == 3
        assert pending.confirmed
        assert pending.block_number == 41

    def test_address_checksummed(self, pending, network):
        network.get_transaction_receipt.return_value = receipt(contract_address=CONTRACT_ADDRESS.lower())

        assert pending.wait(poll_latency=0) == CONTRACT_ADDRESS

    def test_second_wait_uses_cached_result(self, pending, network):
        network.get_transaction_receipt.return_value = receipt()
        pending.wait(poll_latency=0)

        assert pending.wait(poll_latency=0) == CONTRACT_ADDRESS
        assert network.get_transaction_receipt.call_count == 1

    def test_not_confirmed_before_wait(self, pending):
        assert not pending.confirmed
        assert pending.block_number is None

    def test_bounded_timeout(self, pending, network):
        network.get_transaction_receipt.return_value = None

        with pytest.raises(ConfirmationTimeoutError, match='may still be mined'):
            pending.wait(timeout=0.05, poll_latency=0.01)

        assert not pending.confirmed

    def test_timeout_is_network_error(self):
        assert issubclass(ConfirmationTimeoutError, NetworkError)

    def test_cancel_before_first_poll(self, pending, network):
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(DeploymentCancelledError):
            pending.wait(cancel_event=cancel_event)

        network.get_transaction_receipt.assert_not_called()

    def test_cancel_while_waiting(self, pending, network):
        cancel_event = threading.Event()

        def still_pending(tx_hash):
            if network.get_transaction_receipt.call_count == 2:
                cancel_event.set()
            return None

        network.get_transaction_receipt.side_effect = still_pending

        with pytest.raises(DeploymentCancelledError):
            pending.wait(cancel_event=cancel_event, poll_latency=0.01)

        assert network.get_transaction_receipt.call_count == 2

    def test_network_partition_propagates(self, pending, network):
        network.get_transaction_receipt.side_effect = [None, NetworkError("Receipt query failed")]

        with pytest.raises(NetworkError):
            pending.wait(poll_latency=0)


class TestFailedReceipts:

    def test_reverted_creation(self, pending, network):
        network.get_transaction_receipt.return_value = receipt(status=0)

        with pytest.raises(SubmissionError, match='reverted'):
            pending.wait(poll_latency=0)

        assert not pending.confirmed

    def test_receipt_without_contract_address(self, pending, network):
        network.get_transaction_receipt.return_value = receipt(contract_address=None)

        with pytest.raises(SubmissionError, match='no contract address'):
            pending.wait(poll_latency=0)
