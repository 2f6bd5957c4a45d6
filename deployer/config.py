"""
Deployment Configuration
Loads config/deploy_config.json and applies environment overrides
"""

import os
import math
import json
from typing import Dict, Mapping, Optional
from loguru import logger

from .exceptions import ConfigurationError


DEFAULT_CONFIG_PATH = "config/deploy_config.json"

DEFAULT_DEPLOYMENT = {
    'contract_name': 'Project',
    'display_name': 'Project',
    'artifacts_dir': 'artifacts',
    'record_path': 'deployment-info.json',
    'gas_buffer': 1.2,
    'default_gas_limit': 3000000,
    'poll_latency_seconds': 2.0,
    'confirmation_timeout_seconds': None,
    'verify_command': 'npx hardhat verify --network {network} {address}',
    'features': []
}

DEFAULT_LOGGING = {
    'level': 'INFO',
    'file': None,
    'rotation': '1 day',
    'retention': '7 days'
}

REQUIRED_NETWORK_KEYS = ('name', 'chain_id', 'rpc_url_env')


def load_config(
    config_path: str = DEFAULT_CONFIG_PATH,
    network: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Dict:
    """
    Load and resolve deployment configuration

    Args:
        config_path: Path to the JSON configuration file
        network: Network key to deploy to (None = default_network)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Resolved config dict with 'network', 'deployment', 'logging'
        and 'private_key_env' sections

    Raises:
        ConfigurationError: If the file is missing/malformed or the
            selected network is unknown or incomplete
    """
    if environ is None:
        environ = os.environ

    try:
        with open(config_path, 'r') as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Malformed config file {config_path}: {e}") from e

    networks = raw.get('networks', {})
    network_key = network or raw.get('default_network')

    if not network_key or network_key not in networks:
        raise ConfigurationError(
            f"Unknown network '{network_key}' (available: {', '.join(sorted(networks)) or 'none'})"
        )

    network_config = _resolve_network(network_key, networks[network_key], environ)
    deployment_config = _resolve_deployment(raw.get('deployment', {}), environ)

    logging_config = {**DEFAULT_LOGGING, **raw.get('logging', {})}

    logger.debug(f"Loaded config from {config_path} for network {network_key}")

    return {
        'network': network_config,
        'deployment': deployment_config,
        'logging': logging_config,
        'private_key_env': raw.get('private_key_env', 'DEPLOYER_PRIVATE_KEY')
    }


def _resolve_network(key: str, network_config: Dict, environ: Mapping[str, str]) -> Dict:
    """Validate a network entry and resolve its RPC URL"""
    missing = [k for k in REQUIRED_NETWORK_KEYS if k not in network_config]
    if missing:
        raise ConfigurationError(
            f"Network '{key}' is missing required keys: {', '.join(missing)}"
        )

    try:
        chain_id = int(network_config['chain_id'])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid chain_id for network '{key}'") from e

    rpc_url = environ.get(network_config['rpc_url_env']) or network_config.get('default_rpc_url')

    return {
        'key': key,
        'name': network_config['name'],
        'chain_id': chain_id,
        'currency_symbol': network_config.get('currency_symbol', 'ETH'),
        'rpc_url': rpc_url,
        'block_explorer_url': network_config.get('block_explorer_url'),
        'hardhat_network': network_config.get('hardhat_network', key)
    }


def _resolve_deployment(deployment_config: Dict, environ: Mapping[str, str]) -> Dict:
    """Merge deployment settings with defaults and the timeout override"""
    resolved = {**DEFAULT_DEPLOYMENT, **deployment_config}

    timeout = environ.get('CONFIRMATION_TIMEOUT') or resolved['confirmation_timeout_seconds']

    if timeout in (None, ''):
        resolved['confirmation_timeout_seconds'] = None
    else:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid confirmation timeout: {timeout!r}") from e

        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigurationError("Confirmation timeout must be a positive number of seconds")

        resolved['confirmation_timeout_seconds'] = timeout

    if resolved['gas_buffer'] < 1:
        raise ConfigurationError("gas_buffer must be at least 1.0")

    return resolved
