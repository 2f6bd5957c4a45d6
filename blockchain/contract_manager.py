"""
Contract Manager
Loads compiled artifacts and turns them into deployable factories
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List
from loguru import logger

from deployer.exceptions import ArtifactNotFoundError
from .confirmation import PendingDeployment


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract produced by the external build step"""

    name: str
    abi: List[Dict[str, Any]] = field(repr=False)
    bytecode: str = field(repr=False)
    path: Path


class ContractFactory:
    """
    Deploys a single artifact with zero constructor arguments
    """

    def __init__(self, network, artifact: ContractArtifact, transaction_builder):
        """
        Initialize Contract Factory

        Args:
            network: Network collaborator
            artifact: Compiled contract artifact
            transaction_builder: Builder for the creation transaction
        """
        self.network = network
        self.artifact = artifact
        self.transaction_builder = transaction_builder
        self.contract = network.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

    def deploy(self, identity) -> PendingDeployment:
        """
        Sign and broadcast the creation transaction

        Args:
            identity: Signing identity

        Returns:
            PendingDeployment handle

        Raises:
            SubmissionError: If the node rejects the transaction
            NetworkError: On connectivity failure
        """
        transaction = self.transaction_builder.build_deployment_tx(
            self.contract,
            identity.address,
            self.network.chain_id
        )

        logger.info("Signing transaction...")
        signed_tx = identity.sign_transaction(transaction)

        logger.info("Sending deployment transaction...")
        tx_hash = self.network.send_raw_transaction(signed_tx.raw_transaction)

        logger.info(f"Transaction sent: {tx_hash}")
        return PendingDeployment(self.network, tx_hash, self.artifact.name)


class ContractManager:
    """
    Resolves named artifacts from a hardhat artifacts directory
    """

    def __init__(self, network, artifacts_dir: str, transaction_builder):
        """
        Initialize Contract Manager

        Args:
            network: Network collaborator
            artifacts_dir: Hardhat artifacts root (contains contracts/)
            transaction_builder: Builder shared by produced factories
        """
        self.network = network
        self.artifacts_dir = Path(artifacts_dir)
        self.transaction_builder = transaction_builder

    def find_artifact_path(self, name: str) -> Path:
        """
        Locate artifacts/contracts/**/<name>.json

        Raises:
            ArtifactNotFoundError: If no artifact file matches
        """
        contracts_dir = self.artifacts_dir / 'contracts'

        # <name>.dbg.json debug files do not match
        matches = sorted(contracts_dir.glob(f"**/{name}.json"))

        if not matches:
            raise ArtifactNotFoundError(
                f"Contract artifact not found: {name} (looked under {contracts_dir}). "
                "Run 'npx hardhat compile' first"
            )

        if len(matches) > 1:
            logger.warning(f"Multiple artifacts named {name}, using {matches[0]}")

        return matches[0]

    def load_artifact(self, name: str) -> ContractArtifact:
        """
        Load and validate a compiled artifact

        Args:
            name: Contract name

        Returns:
            ContractArtifact

        Raises:
            ArtifactNotFoundError: If the artifact is missing, unreadable or unbuilt
        """
        path = self.find_artifact_path(name)

        try:
            with open(path, 'r') as f:
                contract_json = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactNotFoundError(f"Unreadable contract artifact {path}: {e}") from e

        abi = contract_json.get('abi')
        bytecode = contract_json.get('bytecode')

        if abi is None or not bytecode or bytecode == '0x':
            raise ArtifactNotFoundError(
                f"Contract artifact {path} has no deployable bytecode (abstract or not compiled)"
            )

        return ContractArtifact(name=name, abi=abi, bytecode=bytecode, path=path)

    def get_contract_factory(self, name: str) -> ContractFactory:
        """Resolve a named artifact to a deployable factory"""
        artifact = self.load_artifact(name)
        logger.debug(f"Loaded artifact {artifact.name} from {artifact.path}")

        return ContractFactory(self.network, artifact, self.transaction_builder)
