"""
Pending Deployment
In-flight contract-creation transaction awaiting confirmation
"""

import time
import threading
from typing import Dict, Optional
from web3 import Web3
from loguru import logger

from deployer.exceptions import (
    ConfirmationTimeoutError,
    DeploymentCancelledError,
    SubmissionError,
)


class PendingDeployment:
    """
    Handle for a broadcast creation transaction

    Broadcast is irrevocable: cancelling or timing out only stops
    waiting, the transaction may still be mined afterwards.
    """

    def __init__(self, network, tx_hash: str, contract_name: str):
        """
        Initialize Pending Deployment

        Args:
            network: Network collaborator
            tx_hash: 0x-prefixed transaction hash
            contract_name: Artifact name being deployed
        """
        self.network = network
        self.tx_hash = tx_hash
        self.contract_name = contract_name

        self.receipt: Optional[Dict] = None
        self.contract_address: Optional[str] = None

    @property
    def confirmed(self) -> bool:
        """True once the creation transaction is included in a block"""
        return self.contract_address is not None

    @property
    def block_number(self) -> Optional[int]:
        """Block that included the creation transaction"""
        if self.receipt is None:
            return None
        return self.receipt['blockNumber']

    def wait(
        self,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        poll_latency: float = 2.0
    ) -> str:
        """
        Block until the transaction is mined

        Args:
            timeout: Seconds to wait (None = wait indefinitely)
            cancel_event: Set to stop waiting
            poll_latency: Seconds between receipt polls

        Returns:
            Checksummed address of the deployed contract

        Raises:
            ConfirmationTimeoutError: If timeout elapses first
            DeploymentCancelledError: If cancel_event is set first
            SubmissionError: If the creation transaction reverted
            NetworkError: If the receipt query fails
        """
        if self.confirmed:
            return self.contract_address

        logger.info(f"Waiting for confirmation of {self.tx_hash}...")

        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise DeploymentCancelledError(
                    f"Stopped waiting for {self.tx_hash}; the transaction may still be mined"
                )

            receipt = self.network.get_transaction_receipt(self.tx_hash)
            if receipt is not None:
                return self._resolve(receipt)

            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise ConfirmationTimeoutError(
                        f"{self.tx_hash} not confirmed after {timeout}s; "
                        "the transaction may still be mined"
                    )
                delay = min(poll_latency, remaining)
            else:
                delay = poll_latency

            if cancel_event is not None:
                cancel_event.wait(delay)
            else:
                time.sleep(delay)

    def _resolve(self, receipt: Dict) -> str:
        """Extract the contract address from a receipt"""
        if receipt['status'] != 1:
            raise SubmissionError(
                f"Deployment transaction {self.tx_hash} reverted in block {receipt['blockNumber']}"
            )

        contract_address = receipt.get('contractAddress')
        if not contract_address:
            raise SubmissionError(
                f"Receipt for {self.tx_hash} carries no contract address"
            )

        self.receipt = receipt
        self.contract_address = Web3.to_checksum_address(contract_address)

        logger.debug(f"{self.contract_name} mined in block {receipt['blockNumber']}")
        return self.contract_address

    def __repr__(self):
        state = 'confirmed' if self.confirmed else 'pending'
        return f"PendingDeployment({self.contract_name}, {self.tx_hash}, {state})"
