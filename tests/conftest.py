"""
Shared fixtures for deployment tests
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import Mock
from web3 import Web3
from loguru import logger

from blockchain.network import Network
from blockchain.contract_manager import ContractFactory, ContractManager
from blockchain.confirmation import PendingDeployment
from deployer.context import DeploymentContext
from deployer.records import RecordStore
from deployer.wallet_manager import Identity, WalletManager


# Hardhat default account #0
HARDHAT_KEY = '0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80'
HARDHAT_ADDRESS = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'

CONTRACT_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'
TX_HASH = '0x' + 'ab' * 32

FIXED_TIME = datetime(2025, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def network_config():
    """Resolved Core Testnet 2 network section"""
    return {
        'key': 'core_testnet2',
        'name': 'Core Testnet 2',
        'chain_id': 1114,
        'currency_symbol': 'tCORE2',
        'rpc_url': 'http://127.0.0.1:8545',
        'block_explorer_url': 'https://scan.test2.btcs.network',
        'hardhat_network': 'core_testnet'
    }


@pytest.fixture
def deployment_config(tmp_path):
    """Resolved deployment section"""
    return {
        'contract_name': 'Project',
        'display_name': 'DeFiStrand',
        'artifacts_dir': str(tmp_path / 'artifacts'),
        'record_path': str(tmp_path / 'deployment-info.json'),
        'gas_buffer': 1.2,
        'default_gas_limit': 3000000,
        'poll_latency_seconds': 0,
        'confirmation_timeout_seconds': None,
        'verify_command': 'npx hardhat verify --network {network} {address}',
        'features': ['Create DeFi Strands with custom risk levels', 'Pausable for emergency situations']
    }


@pytest.fixture
def config(network_config, deployment_config):
    return {
        'network': network_config,
        'deployment': deployment_config,
        'logging': {'level': 'DEBUG', 'file': None},
        'private_key_env': 'DEPLOYER_PRIVATE_KEY'
    }


@pytest.fixture
def mock_network(network_config):
    """Network collaborator with a quiet, healthy chain"""
    network = Mock(spec=Network)
    network.w3 = Mock()
    network.config = network_config
    network.name = network_config['name']
    network.chain_id = network_config['chain_id']
    network.currency_symbol = network_config['currency_symbol']

    network.from_wei.side_effect = Web3.from_wei
    network.get_balance.return_value = 5 * 10**18
    network.ensure_chain_id.return_value = network_config['chain_id']
    network.get_block_number.return_value = 42
    return network


@pytest.fixture
def identity():
    identity = Mock(spec=Identity)
    identity.address = HARDHAT_ADDRESS
    identity.get_balance.side_effect = lambda network: network.get_balance(HARDHAT_ADDRESS)
    return identity


@pytest.fixture
def pending():
    pending = Mock(spec=PendingDeployment)
    pending.tx_hash = TX_HASH
    pending.block_number = 41
    pending.wait.return_value = CONTRACT_ADDRESS
    return pending


@pytest.fixture
def context(config, mock_network, identity, pending, tmp_path):
    """DeploymentContext wired entirely with mocks and a tmp record file"""
    wallet_manager = Mock(spec=WalletManager)
    wallet_manager.get_signer.return_value = identity

    factory = Mock(spec=ContractFactory)
    factory.deploy.return_value = pending

    contract_manager = Mock(spec=ContractManager)
    contract_manager.get_contract_factory.return_value = factory

    return DeploymentContext(
        config=config,
        network=mock_network,
        wallet_manager=wallet_manager,
        contract_manager=contract_manager,
        record_store=RecordStore(config['deployment']['record_path'])
    )


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record['message']), level='DEBUG')
    yield messages
    logger.remove(handler_id)
