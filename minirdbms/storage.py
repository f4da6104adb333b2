"""
Storage engine for MiniRDBMS
Snapshot persistence behind a small load/save contract
"""

import contextlib
import json
import logging
import os
from typing import Any, Dict, Optional

from minirdbms.errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_KEY = 'mini-rdbms'

# table name -> {'name', 'columns', 'rows'}
Snapshot = Dict[str, Dict[str, Any]]


def encode_snapshot(snapshot: Snapshot) -> str:
    try:
        return json.dumps(snapshot)
    except (TypeError, ValueError) as e:
        raise StorageError(f"Snapshot is not serializable: {e}") from e


def decode_snapshot(blob: str) -> Snapshot:
    try:
        data = json.loads(blob)
    except ValueError as e:
        raise StorageError(f"Corrupted snapshot: {e}") from e
    if not isinstance(data, dict):
        raise StorageError(f"Corrupted snapshot: expected an object, got {type(data).__name__}")
    return data


class SnapshotStore:
    """Key-value blob store holding the database snapshot.

    ``load`` returns None when nothing has been saved yet. Both methods
    raise StorageError on failure.
    """

    def load(self) -> Optional[Snapshot]:
        raise NotImplementedError

    def save(self, snapshot: Snapshot):
        raise NotImplementedError


class MemoryStore(SnapshotStore):
    """Keeps the encoded snapshot in memory"""

    def __init__(self, blob: Optional[str] = None):
        self.blob = blob
        self.save_count = 0

    def load(self) -> Optional[Snapshot]:
        if self.blob is None:
            return None
        return decode_snapshot(self.blob)

    def save(self, snapshot: Snapshot):
        self.blob = encode_snapshot(snapshot)
        self.save_count += 1


class FileStore(SnapshotStore):
    """JSON file ``<data_dir>/<key>.json``"""

    def __init__(self, data_dir: str = './data', key: str = DEFAULT_KEY):
        self.data_dir = data_dir
        self.key = key

    @property
    def path(self) -> str:
        return os.path.join(self.data_dir, f'{self.key}.json')

    def load(self) -> Optional[Snapshot]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                blob = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read snapshot {self.path}", exc_info=True)
            raise StorageError(f"Failed to read snapshot {self.path}: {e}") from e
        return decode_snapshot(blob)

    def save(self, snapshot: Snapshot):
        blob = encode_snapshot(snapshot)
        tmp_path = f'{self.path}.tmp'
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(blob)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write snapshot {self.path}", exc_info=True)
            with contextlib.suppress(OSError):
                os.remove(tmp_path)
            raise StorageError(f"Failed to write snapshot {self.path}: {e}") from e
        logger.debug(f"Saved snapshot to {self.path} ({len(blob)} bytes)")
