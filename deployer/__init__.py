"""
Contract Deployer Package
Deploys a single contract and records the deployment
"""

from .exceptions import (
    ArtifactNotFoundError,
    ConfigurationError,
    ConfirmationTimeoutError,
    DeploymentCancelledError,
    DeploymentError,
    NetworkError,
    PersistenceError,
    RecordValidationError,
    SubmissionError,
)
from .records import DeploymentRecord, RecordStore
from .wallet_manager import Identity, WalletManager

__all__ = [
    'DeploymentError',
    'ConfigurationError',
    'NetworkError',
    'ConfirmationTimeoutError',
    'DeploymentCancelledError',
    'ArtifactNotFoundError',
    'SubmissionError',
    'PersistenceError',
    'RecordValidationError',
    'DeploymentRecord',
    'RecordStore',
    'Identity',
    'WalletManager'
]
