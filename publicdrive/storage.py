import json
import logging
import os
import tempfile
import threading
import time
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

_locks = {}
_locks_guard = threading.Lock()


def iso_timestamp(ts):
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T10:00:00.000Z"""
    return datetime.fromtimestamp(ts, timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def utc_now_iso():
    return iso_timestamp(time.time())


def _lock_for(path):
    key = str(path)
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.RLock()
        return _locks[key]


class JsonDocument:
    """
    A single JSON file read and written as a whole.

    A missing or unparsable file reads as the default value. Writes go to a
    temp file in the same directory and are moved into place with os.replace.
    Read-modify-write cycles in this process serialize on `lock`; writers in
    other processes can still overwrite each other.
    """

    def __init__(self, path, default_factory):
        self.path = Path(path)
        self.default_factory = default_factory
        self.lock = _lock_for(self.path.resolve())

    def read(self):
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return self.default_factory()
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {self.path.name}, treating as empty: {e}")
            return self.default_factory()

        if not isinstance(data, type(self.default_factory())):
            logger.warning(f"Unexpected content in {self.path.name}, treating as empty")
            return self.default_factory()
        return data

    def write(self, data):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f'.{self.path.name}.', dir=self.path.parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
