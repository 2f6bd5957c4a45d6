"""
Deployment Records
Write-once summary of a completed deployment and its file store
"""

import os
import json
import stat
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union
from loguru import logger

from .exceptions import PersistenceError, RecordValidationError


# Wire key -> attribute, in serialization order
RECORD_FIELDS = (
    ('contractAddress', 'contract_address'),
    ('network', 'network'),
    ('chainId', 'chain_id'),
    ('deployer', 'deployer'),
    ('deploymentTime', 'deployment_time'),
    ('blockNumber', 'block_number'),
)


def format_timestamp(moment: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision

    Naive datetimes are taken to be UTC.

    Returns:
        e.g. "2025-01-31T12:00:00.000Z"
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class DeploymentRecord:
    """Information about a completed deployment"""

    contract_address: str
    network: str  # Human-readable network name
    chain_id: int
    deployer: str
    deployment_time: str  # ISO-8601
    block_number: int

    def __post_init__(self):
        for wire_key, attr in RECORD_FIELDS:
            value = getattr(self, attr)
            if value is None or value == '':
                raise RecordValidationError(f"Deployment record field '{wire_key}' is empty")

    def to_dict(self) -> Dict[str, Any]:
        """Record as a dict with camelCase keys"""
        return {wire_key: getattr(self, attr) for wire_key, attr in RECORD_FIELDS}

    def to_json(self) -> str:
        """Compact JSON encoding"""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeploymentRecord':
        """
        Build a record from its camelCase dict form

        Raises:
            RecordValidationError: If a field is missing or empty
        """
        missing = [wire_key for wire_key, _ in RECORD_FIELDS if wire_key not in data]
        if missing:
            raise RecordValidationError(f"Deployment record missing fields: {', '.join(missing)}")

        return cls(**{attr: data[wire_key] for wire_key, attr in RECORD_FIELDS})


class RecordStore:
    """
    Stores the deployment record at a fixed path

    Writes go to a temp file in the same directory and are renamed
    over the target, so readers never see a half-written record.
    """

    def __init__(self, path: Union[str, Path] = 'deployment-info.json'):
        """
        Initialize Record Store

        Args:
            path: Record file path
        """
        self.path = Path(path)

    def save(self, record: DeploymentRecord) -> Path:
        """
        Persist a record, replacing any previous one

        Args:
            record: Record to write

        Returns:
            Path written

        Raises:
            PersistenceError: If the write cannot complete
        """
        tmp_path = None

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix='.tmp'
            )
            with os.fdopen(fd, 'w') as f:
                f.write(record.to_json())
                f.flush()
                os.fsync(f.fileno())

            # mkstemp creates 0600; the record stays readable by other tools
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.path)

        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(f"Could not write deployment record to {self.path}: {e}") from e

        logger.debug(f"Deployment record written to {self.path}")
        return self.path

    def _file_mode(self) -> int:
        """Mode of the existing record, else 0666 masked by the umask"""
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def load(self) -> Optional[DeploymentRecord]:
        """
        Load the stored record

        Returns:
            DeploymentRecord, or None if no record file exists

        Raises:
            PersistenceError: If the file exists but is not a valid record
        """
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read deployment record {self.path}: {e}") from e

        try:
            return DeploymentRecord.from_dict(data)
        except (RecordValidationError, TypeError) as e:
            raise PersistenceError(f"Invalid deployment record {self.path}: {e}") from e
