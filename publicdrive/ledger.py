import logging

from .errors import AlreadyExists
from .paths import is_within, parent_of
from .storage import JsonDocument, utc_now_iso

logger = logging.getLogger(__name__)


class VirtualFolderLedger:
    """
    Folders that exist only as JSON entries, for hosts where the storage
    root cannot be written (e.g. a serverless deployment).

    Entries are keyed by their full root-relative path in one flat mapping:
    {'docs/notes': {'type': 'folder', 'name': 'notes', 'path': 'docs/notes', 'createdAt': ...}}
    """

    def __init__(self, path):
        self.document = JsonDocument(path, dict)

    def list(self):
        return self.document.read()

    def exists(self, path):
        return path in self.document.read()

    def has_prefix(self, path):
        """True when the path itself or any descendant is recorded."""
        return any(is_within(key, path) for key in self.document.read())

    def children_of(self, parent_path, entries=None):
        if entries is None:
            entries = self.document.read()
        return [entry for key, entry in entries.items() if parent_of(key) == parent_path]

    def create(self, path, name):
        with self.document.lock:
            entries = self.document.read()
            if path in entries:
                raise AlreadyExists('Folder already exists')
            entry = {
                'type': 'folder',
                'name': name,
                'path': path,
                'createdAt': utc_now_iso(),
            }
            entries[path] = entry
            self.document.write(entries)
        logger.info(f"Recorded virtual folder {path}")
        return entry

    def delete(self, path):
        """Removes the entry and all of its descendants; returns the removed keys."""
        with self.document.lock:
            entries = self.document.read()
            removed = [key for key in entries if is_within(key, path)]
            if not removed:
                return []
            for key in removed:
                del entries[key]
            self.document.write(entries)
        logger.info(f"Removed {len(removed)} virtual folder(s) under {path}")
        return removed

    def clear(self):
        with self.document.lock:
            self.document.write({})
