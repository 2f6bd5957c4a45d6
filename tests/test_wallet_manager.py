"""
Unit Tests for Signer Resolution
"""

import pytest
from unittest.mock import Mock

from deployer.exceptions import ConfigurationError
from deployer.wallet_manager import Identity, WalletManager

from conftest import HARDHAT_ADDRESS, HARDHAT_KEY


class TestWalletManager:

    def test_resolves_identity(self):
        manager = WalletManager(environ={'DEPLOYER_PRIVATE_KEY': HARDHAT_KEY})

        identity = manager.get_signer()

        assert isinstance(identity, Identity)
        assert identity.address == HARDHAT_ADDRESS

    def test_key_without_prefix(self):
        manager = WalletManager(environ={'DEPLOYER_PRIVATE_KEY': HARDHAT_KEY[2:]})
        assert manager.get_signer().address == HARDHAT_ADDRESS

    def test_custom_env_name(self):
        manager = WalletManager('CORE_KEY', environ={'CORE_KEY': HARDHAT_KEY})
        assert manager.get_signer().address == HARDHAT_ADDRESS

    def test_signer_resolved_once(self):
        manager = WalletManager(environ={'DEPLOYER_PRIVATE_KEY': HARDHAT_KEY})
        assert manager.get_signer() is manager.get_signer()

    @pytest.mark.parametrize('environ', [{}, {'DEPLOYER_PRIVATE_KEY': ''}, {'DEPLOYER_PRIVATE_KEY': '   '}])
    def test_missing_key(self, environ):
        with pytest.raises(ConfigurationError, match='DEPLOYER_PRIVATE_KEY must be set'):
            WalletManager(environ=environ).get_signer()

    @pytest.mark.parametrize('key', ['not-a-key', '0x1234'])
    def test_invalid_key_not_echoed(self, key):
        with pytest.raises(ConfigurationError) as exc_info:
            WalletManager(environ={'DEPLOYER_PRIVATE_KEY': key}).get_signer()

        assert key not in str(exc_info.value)


class TestIdentity:

    def test_balance_queried_through_network(self):
        identity = WalletManager(environ={'DEPLOYER_PRIVATE_KEY': HARDHAT_KEY}).get_signer()
        network = Mock()
        network.get_balance.return_value = 10**18

        assert identity.get_balance(network) == 10**18
        network.get_balance.assert_called_once_with(HARDHAT_ADDRESS)

    def test_signs_transaction(self):
        identity = WalletManager(environ={'DEPLOYER_PRIVATE_KEY': HARDHAT_KEY}).get_signer()

        signed = identity.sign_transaction({
            'nonce': 0,
            'gas': 3000000,
            'gasPrice': 10**9,
            'value': 0,
            'data': '0x6080',
            'chainId': 1114
        })

        assert signed.raw_transaction
