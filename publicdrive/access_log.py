import logging

from .paths import is_within
from .storage import JsonDocument, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100


class AccessLog:
    """Most-recent-first list of opened files, one entry per path."""

    def __init__(self, path, limit=DEFAULT_LIMIT):
        self.document = JsonDocument(path, list)
        self.limit = limit

    def read_all(self):
        return self.document.read()

    def record(self, file_path, file_name, size=0):
        entry = {
            'filePath': file_path,
            'fileName': file_name,
            'accessedAt': utc_now_iso(),
            'size': size or 0,
        }
        with self.document.lock:
            entries = [e for e in self.document.read() if e.get('filePath') != file_path]
            entries.insert(0, entry)
            self.document.write(entries[:self.limit])
        return entry

    def prune(self, path, recursive=False):
        """Drops entries for `path` (and, if recursive, everything below it)."""
        if recursive:
            def matches(e):
                return is_within(e.get('filePath', ''), path)
        else:
            def matches(e):
                return e.get('filePath') == path

        with self.document.lock:
            entries = self.document.read()
            kept = [e for e in entries if not matches(e)]
            if len(kept) == len(entries):
                return 0
            self.document.write(kept)
        return len(entries) - len(kept)

    def clear(self):
        with self.document.lock:
            self.document.write([])
