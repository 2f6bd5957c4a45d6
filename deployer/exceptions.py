"""
Deployment Exceptions
Error taxonomy for the deployment sequence
"""


class DeploymentError(Exception):
    """Base exception for deployment errors"""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when configuration or the signing identity is unusable"""

    pass


class NetworkError(DeploymentError):
    """Raised on RPC or connectivity failure"""

    pass


class ConfirmationTimeoutError(NetworkError):
    """Raised when a bounded confirmation wait elapses"""

    pass


class DeploymentCancelledError(DeploymentError):
    """Raised when the confirmation wait is cancelled by the operator"""

    pass


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when the compiled contract artifact is missing or unbuilt"""

    pass


class SubmissionError(DeploymentError):
    """Raised when the creation transaction is rejected or reverted"""

    pass


class PersistenceError(DeploymentError):
    """Raised when the deployment record cannot be written"""

    pass


class RecordValidationError(DeploymentError, ValueError):
    """Raised when a deployment record field is empty"""

    pass
