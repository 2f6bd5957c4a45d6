"""
Transaction Builder
Constructs the contract-creation transaction
"""

from typing import Dict
from web3.exceptions import Web3Exception
from loguru import logger

from deployer.exceptions import NetworkError


class TransactionBuilder:
    """
    Builds creation transactions with a buffered gas estimate
    """

    def __init__(self, network, deployment_config: Dict):
        """
        Initialize Transaction Builder

        Args:
            network: Network collaborator
            deployment_config: Resolved deployment section of the config
        """
        self.network = network
        self.gas_buffer = deployment_config['gas_buffer']
        self.default_gas_limit = deployment_config['default_gas_limit']

    def estimate_gas_limit(self, contract, sender: str) -> int:
        """
        Estimate gas for the constructor call plus buffer

        Args:
            contract: Web3 contract factory (abi + bytecode)
            sender: Deployer address

        Returns:
            Gas limit
        """
        try:
            gas_estimate = contract.constructor().estimate_gas({'from': sender})
            return int(gas_estimate * self.gas_buffer)
        except OSError as e:
            raise NetworkError(f"Gas estimation failed: {e}") from e
        except (Web3Exception, ValueError) as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            return self.default_gas_limit

    def build_deployment_tx(self, contract, sender: str, chain_id: int) -> Dict:
        """
        Build the creation transaction with no constructor arguments

        Args:
            contract: Web3 contract factory (abi + bytecode)
            sender: Deployer address
            chain_id: Target chain id

        Returns:
            Unsigned transaction dict
        """
        logger.info("Building deployment transaction...")

        nonce = self.network.get_transaction_count(sender)
        gas_price = self.network.get_gas_price()
        gas_limit = self.estimate_gas_limit(contract, sender)

        logger.info(f"Gas limit: {gas_limit}")
        logger.info(f"Gas price: {self.network.from_wei(gas_price, 'gwei')} gwei")

        transaction = contract.constructor().build_transaction({
            'from': sender,
            'nonce': nonce,
            'gas': gas_limit,
            'gasPrice': gas_price,
            'chainId': chain_id
        })

        deployment_cost = self.network.from_wei(gas_limit * gas_price, 'ether')
        logger.info(f"Estimated deployment cost: {deployment_cost} {self.network.currency_symbol}")

        return transaction
