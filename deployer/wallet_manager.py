"""
Wallet Manager
Resolves the signing identity used for the deployment transaction
"""

import os
from typing import Dict, Mapping, Optional
from eth_account import Account
from loguru import logger

from .exceptions import ConfigurationError


class Identity:
    """
    Account that signs the deployment transaction
    Resolved once at startup and never mutated
    """

    def __init__(self, account):
        """
        Initialize Identity

        Args:
            account: eth_account LocalAccount
        """
        self._account = account

    @property
    def address(self) -> str:
        """Checksummed account address"""
        return self._account.address

    def get_balance(self, network) -> int:
        """
        Get native-currency balance of this identity

        Args:
            network: Network collaborator

        Returns:
            Balance in wei
        """
        return network.get_balance(self.address)

    def sign_transaction(self, transaction: Dict):
        """Sign a transaction dict with this identity's key"""
        return self._account.sign_transaction(transaction)

    def __repr__(self):
        return f"Identity({self.address})"


class WalletManager:
    """
    Loads the deployer key from the environment
    """

    def __init__(
        self,
        key_env: str = 'DEPLOYER_PRIVATE_KEY',
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize Wallet Manager

        Args:
            key_env: Name of the environment variable holding the private key
            environ: Environment mapping (defaults to os.environ)
        """
        self.key_env = key_env
        self.environ = os.environ if environ is None else environ
        self._identity = None

    def get_signer(self) -> Identity:
        """
        Resolve the signing identity

        Returns:
            Identity for the configured key

        Raises:
            ConfigurationError: If no usable key is configured
        """
        if self._identity is not None:
            return self._identity

        private_key = (self.environ.get(self.key_env) or '').strip()

        if not private_key:
            raise ConfigurationError(f"{self.key_env} must be set")

        try:
            account = Account.from_key(private_key)
        except Exception as e:
            # Never echo the key itself
            raise ConfigurationError(f"{self.key_env} is not a valid private key") from e

        self._identity = Identity(account)
        logger.debug(f"Signer resolved: {self._identity.address}")

        return self._identity
