"""
Deployment Engine
Drives the one-shot contract deployment sequence
"""

import threading
from datetime import datetime, timezone
from typing import Callable, Optional
from loguru import logger

from .context import DeploymentContext
from .exceptions import DeploymentCancelledError, PersistenceError
from .records import DeploymentRecord, format_timestamp
from .report import format_banner, print_report
from .wallet_manager import Identity


class Deployer:
    """
    Deploys one contract and records the result

    Steps run strictly in order and the first error aborts the rest:
    identity -> balance -> factory -> submit -> confirm -> record -> persist -> report
    """

    def __init__(
        self,
        context: DeploymentContext,
        clock: Optional[Callable[[], datetime]] = None,
        cancel_event: Optional[threading.Event] = None
    ):
        """
        Initialize Deployer

        Args:
            context: Collaborators and resolved config for this run
            clock: Returns the current time (defaults to UTC now)
            cancel_event: Set to stop waiting for confirmation
        """
        self.context = context
        self.network = context.network
        self.network_config = context.network_config
        self.deployment_config = context.deployment_config

        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.cancel_event = cancel_event

        self.contract_label = self.deployment_config['display_name']

        # Block observed when the balance was read
        self.start_block: Optional[int] = None

    def run(self) -> DeploymentRecord:
        """
        Execute the full deployment sequence

        Returns:
            The persisted DeploymentRecord

        Raises:
            DeploymentError: From whichever step failed
        """
        print("\n".join(format_banner(
            f"Deploying {self.contract_label} Contract to {self.network_config['name']}"
        )))
        print()

        identity = self.acquire_identity()
        self.query_balance(identity)

        factory = self.get_factory()
        pending = self.submit(factory, identity)
        contract_address = self.await_confirmation(pending)

        record = self.assemble_record(contract_address, identity, pending)
        self.persist_record(record)
        self.report(record)

        return record

    def acquire_identity(self) -> Identity:
        """Resolve the signer; no network access happens before this"""
        identity = self.context.wallet_manager.get_signer()
        logger.info(f"Deploying with account: {identity.address}")
        return identity

    def query_balance(self, identity: Identity) -> int:
        """
        Read the signer's balance and check the connected chain

        Returns:
            Balance in wei
        """
        balance = identity.get_balance(self.network)
        logger.info(
            f"Account balance: {self.network.from_wei(balance, 'ether')} "
            f"{self.network_config.get('currency_symbol', 'ETH')}"
        )

        if balance == 0:
            logger.warning("Deployer balance is zero, submission will likely be rejected")

        self.network.ensure_chain_id()
        self.start_block = self.network.get_block_number()

        return balance

    def get_factory(self):
        """Resolve the configured artifact to a deployable factory"""
        return self.context.contract_manager.get_contract_factory(
            self.deployment_config['contract_name']
        )

    def submit(self, factory, identity: Identity):
        """
        Broadcast the creation transaction

        Raises:
            DeploymentCancelledError: If cancelled before broadcast
        """
        # Last point at which a cancel leaves the chain untouched
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise DeploymentCancelledError("Cancelled before broadcast; nothing was submitted")

        logger.info(f"Deploying {self.contract_label} contract...")
        return factory.deploy(identity)

    def await_confirmation(self, pending) -> str:
        """
        Wait for the creation transaction to be mined

        Returns:
            Deployed contract address
        """
        contract_address = pending.wait(
            timeout=self.deployment_config['confirmation_timeout_seconds'],
            cancel_event=self.cancel_event,
            poll_latency=self.deployment_config['poll_latency_seconds']
        )

        logger.success(f"✅ {self.contract_label} contract deployed successfully!")
        logger.success(f"Contract address: {contract_address}")

        return contract_address

    def assemble_record(self, contract_address: str, identity: Identity, pending) -> DeploymentRecord:
        """Combine the confirmed address with current chain and clock state"""
        block_number = self.network.get_block_number()

        # A lagging node may report a head older than the mining block
        mined_block = getattr(pending, 'block_number', None)
        if isinstance(mined_block, int) and block_number < mined_block:
            block_number = mined_block

        return DeploymentRecord(
            contract_address=contract_address,
            network=self.network_config['name'],
            chain_id=self.network_config['chain_id'],
            deployer=identity.address,
            deployment_time=format_timestamp(self.clock()),
            block_number=block_number
        )

    def persist_record(self, record: DeploymentRecord):
        """
        Write the record, replacing any previous one

        Raises:
            PersistenceError: The contract stays deployed but unrecorded
        """
        store = self.context.record_store

        try:
            previous = store.load()
        except PersistenceError as e:
            logger.warning(f"Replacing unreadable deployment record: {e}")
            previous = None

        if previous is not None and previous.contract_address != record.contract_address:
            logger.warning(
                f"Overwriting previous deployment record ({previous.contract_address} "
                f"on {previous.network})"
            )

        try:
            path = store.save(record)
        except PersistenceError:
            logger.critical(
                f"Contract deployed at {record.contract_address} on {record.network} "
                "but the deployment record was NOT saved"
            )
            raise

        logger.success(f"✅ Deployment info saved to {path}")

    def report(self, record: DeploymentRecord):
        print()
        print_report(record, self.deployment_config, self.network_config)
