"""
Deployment Context
Collaborators for one deployment run, built once and passed in
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from blockchain.network import Network
from blockchain.contract_manager import ContractManager
from blockchain.transaction_builder import TransactionBuilder
from .records import RecordStore
from .wallet_manager import WalletManager


@dataclass
class DeploymentContext:
    """Everything the Deployer needs, in place of process-wide globals"""

    config: Dict
    network: Network
    wallet_manager: WalletManager
    contract_manager: ContractManager
    record_store: RecordStore

    @property
    def network_config(self) -> Dict:
        return self.config['network']

    @property
    def deployment_config(self) -> Dict:
        return self.config['deployment']

    @classmethod
    def from_config(
        cls,
        config: Dict,
        environ: Optional[Mapping[str, str]] = None
    ) -> 'DeploymentContext':
        """
        Wire collaborators from a resolved config

        No RPC call is made here.

        Args:
            config: Result of load_config()
            environ: Environment mapping for the signer key (defaults to os.environ)
        """
        deployment_config = config['deployment']

        network = Network.from_config(config['network'])
        transaction_builder = TransactionBuilder(network, deployment_config)

        return cls(
            config=config,
            network=network,
            wallet_manager=WalletManager(config['private_key_env'], environ),
            contract_manager=ContractManager(
                network,
                deployment_config['artifacts_dir'],
                transaction_builder
            ),
            record_store=RecordStore(deployment_config['record_path'])
        )
