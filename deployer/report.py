"""
Deployment Report
Human-readable console output for the operator
"""

from typing import Dict, List

from .records import DeploymentRecord

RULE = "=" * 50


def format_banner(title: str) -> List[str]:
    return [RULE, title, RULE]


def format_summary(record: DeploymentRecord) -> List[str]:
    """Summary block for a completed deployment"""
    return format_banner("Deployment Summary") + [
        f"Contract Address: {record.contract_address}",
        f"Network: {record.network}",
        f"Chain ID: {record.chain_id}",
        f"Deployer: {record.deployer}",
        f"Block Number: {record.block_number}",
        f"Timestamp: {record.deployment_time}",
        RULE,
    ]


def format_verify_command(address: str, deployment_config: Dict, network_config: Dict) -> str:
    """Fill the verification command template (printed, never executed)"""
    return deployment_config['verify_command'].format(
        network=network_config['hardhat_network'],
        address=address
    )


def format_next_steps(record: DeploymentRecord, deployment_config: Dict, network_config: Dict) -> List[str]:
    lines = [
        "Next Steps:",
        f"1. Save the contract address: {record.contract_address}",
        "2. Verify contract (optional):",
        f"   {format_verify_command(record.contract_address, deployment_config, network_config)}",
        "3. Interact with the contract using the address above",
    ]

    explorer = network_config.get('block_explorer_url')
    if explorer:
        lines.append(f"   Explorer: {explorer.rstrip('/')}/address/{record.contract_address}")

    return lines


def format_features(deployment_config: Dict) -> List[str]:
    features = deployment_config.get('features') or []
    if not features:
        return []

    return format_banner("Contract Features:") + [f"✓ {feature}" for feature in features] + [RULE]


def print_report(record: DeploymentRecord, deployment_config: Dict, network_config: Dict):
    """
    Print summary, follow-up guidance and feature list

    Args:
        record: Persisted deployment record
        deployment_config: Resolved deployment section of the config
        network_config: Resolved network section of the config
    """
    sections = [
        format_summary(record),
        format_next_steps(record, deployment_config, network_config),
        format_features(deployment_config),
    ]

    for section in sections:
        if not section:
            continue
        print("\n".join(section))
        print()
