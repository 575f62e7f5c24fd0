import errno
import logging
import os
from pathlib import Path

from .access_log import AccessLog
from .errors import (AlreadyExists, DriveError, InvalidInput, NotFound,
                     ReadOnlyFileSystem, translate_os_error)
from .ledger import VirtualFolderLedger
from .paths import (clean_name, clean_relative_path, ensure_not_root,
                    join_relative, resolve_user_path, resolve_within)
from .storage import iso_timestamp
from .tree import (FOLDER, flatten_files, iter_files, make_node, merge_virtual,
                   read_tree)

logger = logging.getLogger(__name__)


def _extension(name):
    return os.path.splitext(name)[1][1:].lower()


def remove_tree(dir_path):
    """Deletes every file below dir_path, then the emptied directories bottom-up, then dir_path."""
    for current, dirnames, filenames in os.walk(dir_path, topdown=False):
        for name in filenames:
            os.unlink(os.path.join(current, name))
        for name in dirnames:
            sub = os.path.join(current, name)
            if os.path.islink(sub):
                os.unlink(sub)
            else:
                os.rmdir(sub)
    os.rmdir(dir_path)


def clear_directory(dir_path):
    """Deletes everything inside dir_path but keeps dir_path itself."""
    for entry in os.scandir(dir_path):
        if entry.is_dir(follow_symlinks=False):
            remove_tree(entry.path)
        else:
            os.unlink(entry.path)


class DriveManager:
    """
    Operations on the storage root, the virtual folder ledger and the access log.

    A manager holds no state of its own: every call reads the current
    contents of the directory tree and of both JSON documents.
    """

    def __init__(self, root, ledger, access_log, virtual_fallback=True,
                 recent_limit=20, preview_depth=3, root_label='Public Files'):
        self.root = Path(root)
        self.ledger = ledger
        self.access_log = access_log
        self.virtual_fallback = virtual_fallback
        self.recent_limit = recent_limit
        self.preview_depth = preview_depth
        self.root_label = root_label

    @classmethod
    def from_config(cls, config):
        return cls(
            config['STORAGE_ROOT'],
            VirtualFolderLedger(config['VIRTUAL_FOLDERS_FILE']),
            AccessLog(config['ACCESS_LOG_FILE'], config['ACCESS_LOG_LIMIT']),
            virtual_fallback=config['VIRTUAL_FOLDER_FALLBACK'],
            recent_limit=config['RECENT_FILES_LIMIT'],
            preview_depth=config['PREVIEW_MAX_DEPTH'],
            root_label=config['ROOT_LABEL'],
        )

    # Listing

    def list_tree(self, path=None):
        """Merged physical + virtual tree rooted at `path` (the storage root by default)."""
        relative, full_path = resolve_user_path(self.root, path)
        if full_path.exists() and not full_path.is_dir():
            raise InvalidInput('Path is not a folder')
        nodes = read_tree(full_path, relative) if full_path.is_dir() else []
        children = merge_virtual(nodes, self.ledger.list(), relative)

        if not relative:
            return {'id': 'public-root', 'name': self.root_label, 'type': FOLDER,
                    'path': '', 'children': children}
        return make_node(relative.rsplit('/', 1)[-1], relative, FOLDER, children=children)

    def preview(self, flat=False):
        """Depth-bounded physical listing, or its files only when `flat`."""
        nodes = read_tree(self.root.resolve(), '', max_depth=self.preview_depth)
        return flatten_files(nodes) if flat else nodes

    # Creation

    def create_folder(self, name, parent_path=None):
        folder_name = clean_name(name)
        parent = clean_relative_path(parent_path)
        relative = join_relative(parent, folder_name)
        full_path = resolve_within(self.root, relative)

        if full_path.exists() or self.ledger.exists(relative):
            raise AlreadyExists('Folder already exists')
        self._check_parent_folders(full_path)

        try:
            full_path.mkdir(parents=True, exist_ok=False)
        except FileExistsError:
            raise AlreadyExists('Folder already exists')
        except OSError as e:
            if e.errno != errno.EROFS or not self.virtual_fallback:
                logger.error(f"Create folder error: {e}")
                raise translate_os_error(e, 'Failed to create folder')
            logger.info(f"Read-only storage, recording {relative} as a virtual folder")
            try:
                self.ledger.create(relative, folder_name)
            except OSError as ledger_error:
                logger.error(f"Could not record virtual folder {relative}: {ledger_error}")
                raise translate_os_error(ledger_error, 'Failed to create folder')
            return {'folderName': folder_name, 'path': relative, 'virtual': True}

        logger.info(f"Created folder {relative}")
        return {'folderName': folder_name, 'path': relative, 'virtual': False}

    def upload(self, stream, filename, parent_path=None):
        """Stores a file-like object (or a werkzeug FileStorage) under parent_path."""
        file_name = clean_name(filename)
        parent = clean_relative_path(parent_path)
        relative = join_relative(parent, file_name)
        full_path = resolve_within(self.root, relative)

        if full_path.is_dir():
            raise AlreadyExists('A folder with that name already exists')
        self._check_parent_folders(full_path)

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.info(f"Could not create physical directory {full_path.parent}: {e}")

        try:
            if hasattr(stream, 'save'):
                stream.save(str(full_path))
            else:
                with open(full_path, 'wb') as f:
                    while True:
                        chunk = stream.read(64 * 1024)
                        if not chunk:
                            break
                        f.write(chunk)
        except OSError as e:
            logger.error(f"Upload error: {e}")
            raise translate_os_error(e, 'Failed to save file')

        size = full_path.stat().st_size
        logger.info(f"Uploaded {relative} ({size} bytes)")
        return {'fileName': file_name, 'filePath': relative, 'path': parent, 'fileSize': size}

    def _check_parent_folders(self, full_path):
        """The nearest existing ancestor of full_path must be a folder."""
        root = self.root.resolve()
        for ancestor in full_path.parents:
            if ancestor.exists():
                if not ancestor.is_dir():
                    raise InvalidInput('Parent path is not a folder')
                return
            if ancestor == root:
                return

    # Deletion

    def delete_file(self, path):
        """Unlinks a file; a symlink is removed itself, never its target."""
        relative, full_path = resolve_user_path(self.root, path, follow_links=False)
        if not relative:
            raise InvalidInput('Path is not a file')
        if not os.path.lexists(full_path):
            raise NotFound('File not found')
        if not full_path.is_symlink() and not full_path.is_file():
            raise InvalidInput('Path is not a file')

        try:
            full_path.unlink()
        except OSError as e:
            logger.error(f"Delete file error: {e}")
            raise translate_os_error(e, 'Failed to delete file')

        self._prune_access_log(relative, recursive=False)
        logger.info(f"Deleted file {relative}")
        return relative

    def delete_folder(self, path):
        relative, full_path = resolve_user_path(self.root, path, follow_links=False)
        ensure_not_root(self.root, full_path)

        link = full_path.is_symlink()
        physical = link or full_path.exists()
        if physical and not link and not full_path.is_dir():
            raise InvalidInput('Path is not a directory')
        virtual = self.ledger.has_prefix(relative)
        if not physical and not virtual:
            raise NotFound('Folder not found')

        if virtual:
            try:
                self.ledger.delete(relative)
            except OSError as e:
                if not physical:
                    raise translate_os_error(e, 'Failed to delete folder')
                logger.warning(f"Could not update virtual folders: {e}")

        if physical:
            try:
                if link:
                    full_path.unlink()
                else:
                    remove_tree(full_path)
            except OSError as e:
                logger.error(f"Delete folder error: {e}")
                if e.errno == errno.EROFS:
                    raise ReadOnlyFileSystem(
                        'File system is read-only. Physical folder deletion not supported in this environment.')
                raise translate_os_error(e, 'Failed to delete folder')

        self._prune_access_log(relative, recursive=True)
        logger.info(f"Deleted folder {relative}")
        return relative

    def clear_all(self):
        """Empties the storage root (keeping the root), the ledger and the access log."""
        root = self.root.resolve()
        if not root.is_dir():
            raise NotFound('Storage root not found')

        try:
            clear_directory(root)
        except OSError as e:
            logger.error(f"Error removing all files: {e}")
            raise translate_os_error(e, 'Failed to remove all files and folders')

        for store, label in ((self.ledger, 'virtual folders'), (self.access_log, 'access log')):
            try:
                store.clear()
            except OSError as e:
                logger.warning(f"Could not clear {label}: {e}")
        logger.info("Cleared storage root")

    def _prune_access_log(self, relative, recursive):
        try:
            self.access_log.prune(relative, recursive=recursive)
        except OSError as e:
            logger.warning(f"Could not update access log: {e}")

    # Access tracking

    def record_access(self, file_path, file_name, size=0):
        """Best-effort; returns False when the entry was not recorded."""
        try:
            self.access_log.record(clean_relative_path(file_path), file_name, size)
        except (DriveError, OSError) as e:
            logger.warning(f"Error tracking file access: {e}")
            return False
        return True

    def open_file(self, path):
        relative, full_path = resolve_user_path(self.root, path)
        if not relative or not full_path.is_file():
            raise NotFound('File not found')
        return relative, full_path

    def recent_files(self):
        """
        Recently opened files that still exist, most recent first. When the
        access log yields nothing, falls back to every stored file ordered
        by modification time.
        """
        recent = []
        for entry in self.access_log.read_all():
            if len(recent) >= self.recent_limit:
                break
            try:
                relative, full_path = resolve_user_path(self.root, entry.get('filePath'))
                stat = full_path.stat()
            except (DriveError, OSError):
                logger.warning(f"File {entry.get('filePath')} no longer exists")
                continue
            if not relative or not full_path.is_file():
                continue
            name = entry.get('fileName') or full_path.name
            recent.append({
                'id': relative,
                'name': name,
                'path': relative,
                'size': entry.get('size') or stat.st_size,
                'lastModified': iso_timestamp(stat.st_mtime),
                'extension': _extension(name),
                'accessedAt': entry.get('accessedAt'),
            })
        if recent:
            return recent

        files = sorted(iter_files(self.root.resolve()), key=lambda item: item[1].st_mtime, reverse=True)
        return [{
            'id': relative,
            'name': relative.rsplit('/', 1)[-1],
            'path': relative,
            'size': stat.st_size,
            'lastModified': iso_timestamp(stat.st_mtime),
            'extension': _extension(relative),
        } for relative, stat in files[:self.recent_limit]]
