"""
Blockchain Interaction Package
Handles RPC access, artifact loading, transaction building and confirmation
"""

from .network import Network
from .contract_manager import ContractArtifact, ContractFactory, ContractManager
from .transaction_builder import TransactionBuilder
from .confirmation import PendingDeployment

__all__ = [
    'Network',
    'ContractArtifact',
    'ContractFactory',
    'ContractManager',
    'TransactionBuilder',
    'PendingDeployment'
]
