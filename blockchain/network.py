"""
Network
Thin RPC collaborator over Web3 for the deployment sequence
"""

from contextlib import contextmanager
from decimal import Decimal
from typing import Dict, Optional
from web3 import Web3
from web3.exceptions import TransactionNotFound, Web3Exception
from loguru import logger

from deployer.exceptions import ConfigurationError, NetworkError, SubmissionError


@contextmanager
def rpc_call(action: str):
    """Translate RPC/connectivity failures into NetworkError"""
    try:
        yield
    except (Web3Exception, OSError) as e:
        raise NetworkError(f"{action} failed: {e}") from e


class Network:
    """
    Read and submit primitives for a single configured chain
    No retries: every failure propagates to the caller
    """

    def __init__(self, w3: Web3, network_config: Dict):
        """
        Initialize Network

        Args:
            w3: Web3 instance
            network_config: Resolved network section of the config
        """
        self.w3 = w3
        self.config = network_config
        self.name = network_config['name']
        self.chain_id = network_config['chain_id']
        self.currency_symbol = network_config.get('currency_symbol', 'ETH')

    @classmethod
    def from_config(cls, network_config: Dict) -> 'Network':
        """
        Create a Network backed by an HTTP provider

        Raises:
            ConfigurationError: If no RPC URL is configured
        """
        rpc_url = network_config.get('rpc_url')

        if not rpc_url:
            raise ConfigurationError(f"No RPC URL configured for {network_config['name']}")

        # Provider construction does not touch the network
        w3 = Web3(Web3.HTTPProvider(rpc_url))
        logger.debug(f"Using RPC endpoint for {network_config['name']}: {rpc_url}")

        return cls(w3, network_config)

    def get_balance(self, address: str) -> int:
        """Get native balance in wei"""
        with rpc_call("Balance query"):
            return self.w3.eth.get_balance(address)

    def get_block_number(self) -> int:
        """Get latest block number"""
        with rpc_call("Block number query"):
            return self.w3.eth.block_number

    def get_chain_id(self) -> int:
        """Get chain id reported by the node"""
        with rpc_call("Chain id query"):
            return self.w3.eth.chain_id

    def ensure_chain_id(self) -> int:
        """
        Check the node serves the configured chain

        Raises:
            NetworkError: If the node reports a different chain id
        """
        chain_id = self.get_chain_id()

        if chain_id != self.chain_id:
            raise NetworkError(
                f"RPC endpoint serves chain {chain_id}, expected {self.chain_id} ({self.name})"
            )

        return chain_id

    def get_transaction_count(self, address: str) -> int:
        """Get next nonce including pending transactions"""
        with rpc_call("Nonce query"):
            return self.w3.eth.get_transaction_count(address, 'pending')

    def get_gas_price(self) -> int:
        """Get current gas price in wei"""
        with rpc_call("Gas price query"):
            return self.w3.eth.gas_price

    def from_wei(self, value: int, unit: str = 'ether') -> Decimal:
        """Convert wei to the given unit"""
        return Web3.from_wei(value, unit)

    def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """
        Broadcast a signed transaction

        Returns:
            Transaction hash as 0x-prefixed hex

        Raises:
            SubmissionError: If the node rejects the transaction
            NetworkError: On connectivity failure
        """
        try:
            tx_hash = self.w3.eth.send_raw_transaction(raw_transaction)
        except OSError as e:
            raise NetworkError(f"Transaction broadcast failed: {e}") from e
        except (Web3Exception, ValueError) as e:
            raise SubmissionError(f"Transaction rejected: {e}") from e

        return Web3.to_hex(tx_hash)

    def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict]:
        """
        Get receipt for a transaction

        Returns:
            Receipt, or None while the transaction is still pending
        """
        try:
            return self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        except (Web3Exception, OSError) as e:
            raise NetworkError(f"Receipt query failed: {e}") from e

    def get_code(self, address: str) -> bytes:
        """Get deployed bytecode at an address"""
        with rpc_call("Code query"):
            return bytes(self.w3.eth.get_code(address))
