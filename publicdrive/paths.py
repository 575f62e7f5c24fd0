import logging
import re
from pathlib import Path

from werkzeug.security import safe_join

from .errors import ForbiddenOperation, InvalidInput, PathEscape

logger = logging.getLogger(__name__)

ILLEGAL_NAME_CHARS = re.compile(r'[<>:"/\\|?*]')


def clean_relative_path(path_str):
    """
    Normalizes a user-provided path relative to the storage root.

    Leading slashes and empty or '.' segments are dropped and backslashes are
    treated as separators. A '..' segment is a traversal attempt and raises
    PathEscape. Returns '' for the root itself.
    """
    if path_str is None:
        return ''
    if not isinstance(path_str, str):
        raise InvalidInput('Path must be a string')
    if '\0' in path_str:
        raise InvalidInput('Path contains a null byte')

    parts = []
    for part in path_str.strip().replace('\\', '/').split('/'):
        part = part.strip()
        if not part or part == '.':
            continue
        if part == '..':
            logger.warning(f"Path traversal attempt: {path_str}")
            raise PathEscape('Invalid path')
        parts.append(part)
    return '/'.join(parts)


def clean_name(name):
    """Strips filesystem-illegal characters from a single file or folder name."""
    if not isinstance(name, str):
        raise InvalidInput('Name is required')
    cleaned = ILLEGAL_NAME_CHARS.sub('', name.strip()).strip()
    if '\0' in cleaned:
        raise InvalidInput('Name contains a null byte')
    if not cleaned or cleaned in ('.', '..'):
        raise InvalidInput('Invalid name')
    return cleaned


def join_relative(parent, name):
    """Joins two root-relative paths; an empty parent omits the separator."""
    return f'{parent}/{name}' if parent else name


def parent_of(path):
    """Parent path derived by truncating at the last '/'."""
    return path.rsplit('/', 1)[0] if '/' in path else ''


def is_within(path, ancestor):
    """Segment-aware prefix test: 'a/b' is within 'a' but 'ab' is not."""
    return path == ancestor or path.startswith(ancestor + '/')


def resolve_within(root, relative_path, follow_links=True):
    """
    Resolves a cleaned relative path against the storage root.

    Both sides are canonicalized (symlinks included) before the containment
    check, and the check compares path segments rather than raw strings.
    With follow_links=False only the parent is canonicalized, so a final
    component that is itself a symlink is returned as the link, not its target.
    """
    base = Path(root).resolve()
    joined = safe_join(str(base), relative_path) if relative_path else str(base)
    if joined is None:
        logger.warning(f"Path traversal attempt: {relative_path}")
        raise PathEscape('Invalid path')

    if follow_links or not relative_path:
        full_path = Path(joined).resolve()
        checked = full_path
    else:
        joined = Path(joined)
        checked = joined.parent.resolve()
        full_path = checked / joined.name
    if checked != base and base not in checked.parents:
        logger.warning(f"Path escapes storage root: {relative_path} -> {full_path}")
        raise PathEscape('Invalid path')
    return full_path


def resolve_user_path(root, path_str, follow_links=True):
    """Cleans then resolves a raw user path; returns (relative, absolute)."""
    relative = clean_relative_path(path_str)
    return relative, resolve_within(root, relative, follow_links)


def ensure_not_root(root, full_path):
    if full_path == Path(root).resolve():
        raise ForbiddenOperation('Cannot delete the storage root')
