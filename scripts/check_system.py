"""
System Check Script
Verifies configuration, signer, RPC and artifact before deploying
"""

import sys
import argparse
from typing import List, Optional
from loguru import logger
from dotenv import load_dotenv

from deployer.config import DEFAULT_CONFIG_PATH, load_config
from deployer.context import DeploymentContext
from deployer.exceptions import DeploymentError


def check_signer(context: DeploymentContext) -> bool:
    """Check the deployer key resolves to an account"""
    logger.info("Checking deployer key...")

    try:
        identity = context.wallet_manager.get_signer()
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"  ✓ Deployer: {identity.address}")
    return True


def check_rpc_connection(context: DeploymentContext) -> bool:
    """Check the RPC endpoint answers and serves the configured chain"""
    logger.info("Checking RPC connection...")

    try:
        chain_id = context.network.ensure_chain_id()
        block = context.network.get_block_number()
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"  ✓ {context.network.name}: Connected (Chain ID: {chain_id}, Block: {block})")
    return True


def check_wallet_balance(context: DeploymentContext) -> bool:
    """Check the deployer can pay for gas"""
    logger.info("Checking deployer balance...")

    try:
        identity = context.wallet_manager.get_signer()
        balance = identity.get_balance(context.network)
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    symbol = context.network_config.get('currency_symbol', 'ETH')
    logger.info(f"  Balance: {context.network.from_wei(balance, 'ether')} {symbol}")

    if balance == 0:
        logger.error(f"  ✗ Deployer has no {symbol} for gas")
        return False

    logger.success("  ✓ Deployer balance non-zero")
    return True


def check_artifact(context: DeploymentContext) -> bool:
    """Check the compiled artifact is present and deployable"""
    logger.info("Checking contract artifact...")

    name = context.deployment_config['contract_name']

    try:
        artifact = context.contract_manager.load_artifact(name)
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"  ✓ {artifact.name}: {artifact.path}")
    return True


def check_previous_deployment(context: DeploymentContext) -> bool:
    """Report the recorded deployment, if any (informational)"""
    logger.info("Checking previous deployment record...")

    try:
        record = context.record_store.load()
    except DeploymentError as e:
        logger.warning(f"  ⚠ {e}")
        return True

    if record is None:
        logger.info("  No deployment recorded yet")
        return True

    try:
        code = context.network.get_code(record.contract_address)
    except DeploymentError as e:
        logger.warning(f"  ⚠ Could not check {record.contract_address}: {e}")
        return True

    if code:
        logger.info(f"  Recorded contract live at {record.contract_address} (will be overwritten)")
    else:
        logger.warning(f"  ⚠ No code at recorded address {record.contract_address}")

    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Run all system checks"""
    load_dotenv()

    parser = argparse.ArgumentParser(description="Pre-deployment system check")
    parser.add_argument('--config', default=DEFAULT_CONFIG_PATH)
    parser.add_argument('--network', default=None)
    args = parser.parse_args(argv)

    logger.info("=" * 70)
    logger.info("Deployment System Check")
    logger.info("=" * 70)

    try:
        context = DeploymentContext.from_config(load_config(args.config, args.network))
    except DeploymentError as e:
        logger.error(f"Configuration invalid: {e}")
        return 1

    checks = [
        ("Deployer Key", check_signer),
        ("RPC Connection", check_rpc_connection),
        ("Deployer Balance", check_wallet_balance),
        ("Contract Artifact", check_artifact),
        ("Previous Deployment", check_previous_deployment)
    ]

    results = []

    for name, check_func in checks:
        logger.info("")
        results.append((name, check_func(context)))

    # Summary
    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if passed == total:
        logger.success("✅ Ready to deploy: python deploy.py")
        return 0

    logger.error("❌ Not ready to deploy - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
