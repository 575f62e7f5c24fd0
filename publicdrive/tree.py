import logging
import os
import stat

from .paths import join_relative, parent_of

logger = logging.getLogger(__name__)

FOLDER = 'folder'
FILE = 'file'


def make_node(name, path, node_type, size=None, children=None):
    node = {
        'id': path or name,
        'name': name,
        'type': node_type,
        'path': path,
    }
    if node_type == FOLDER:
        node['children'] = children if children is not None else []
    elif size is not None:
        node['size'] = size
    return node


def sort_key(node):
    return (node['type'] != FOLDER, node['name'].casefold(), node['name'])


def sort_nodes(nodes):
    """Folders before files, then by name."""
    return sorted(nodes, key=sort_key)


def read_tree(dir_path, relative_path='', max_depth=None, _depth=0):
    """
    Recursively lists a directory into folder/file nodes.

    Hidden entries (leading '.') are skipped. `max_depth` bounds how many
    levels are read (None reads everything). A directory that cannot be
    read contributes an empty list instead of failing the whole listing.
    Symlinks are never followed; they are listed as file nodes.
    """
    if max_depth is not None and _depth >= max_depth:
        return []

    try:
        names = os.listdir(dir_path)
    except OSError as e:
        logger.error(f"Error reading directory {dir_path}: {e}")
        return []

    nodes = []
    for name in names:
        if name.startswith('.'):
            continue
        full_path = os.path.join(dir_path, name)
        item_path = join_relative(relative_path, name)
        try:
            st = os.lstat(full_path)
        except OSError as e:
            logger.error(f"Error reading {full_path}: {e}")
            continue

        if stat.S_ISDIR(st.st_mode):
            children = read_tree(full_path, item_path, max_depth, _depth + 1)
            nodes.append(make_node(name, item_path, FOLDER, children=children))
        else:
            nodes.append(make_node(name, item_path, FILE, size=st.st_size))

    return sort_nodes(nodes)


def flatten_files(nodes):
    """Depth-first list of the file nodes in a tree."""
    files = []
    for node in nodes:
        if node['type'] == FILE:
            files.append(node)
        if node.get('children'):
            files.extend(flatten_files(node['children']))
    return files


def merge_virtual(nodes, virtual_entries, level_path=''):
    """
    Merges virtual ledger folders into a physical listing.

    At each level a ledger entry whose parent is `level_path` becomes a
    folder node unless a physical folder with the same name is already
    there. The merge recurses into every folder, so virtual descendants
    appear however deep they are. Input nodes are not modified.
    """
    merged = []
    taken = set()
    for node in nodes:
        if node['type'] == FOLDER:
            node = dict(node, children=merge_virtual(node['children'], virtual_entries, node['path']))
            taken.add(node['name'])
        merged.append(node)

    for key, entry in virtual_entries.items():
        if parent_of(key) != level_path:
            continue
        name = entry.get('name') or key.rsplit('/', 1)[-1]
        if name in taken:
            continue
        taken.add(name)
        children = merge_virtual([], virtual_entries, key)
        merged.append(make_node(name, key, FOLDER, children=children))

    return sort_nodes(merged)


def iter_files(dir_path, relative_path=''):
    """
    Yields (relative_path, os.stat_result) for every non-hidden regular file
    below dir_path. Symlinks are not followed.
    """
    try:
        entries = list(os.scandir(dir_path))
    except OSError as e:
        logger.error(f"Error reading directory {dir_path}: {e}")
        return

    for entry in entries:
        if entry.name.startswith('.'):
            continue
        item_path = join_relative(relative_path, entry.name)
        try:
            if entry.is_dir(follow_symlinks=False):
                yield from iter_files(entry.path, item_path)
            elif entry.is_file(follow_symlinks=False):
                yield item_path, entry.stat()
        except OSError as e:
            logger.error(f"Error reading {entry.path}: {e}")


def format_bytes(bytes_val):
    """Formats bytes into human-readable string."""
    if bytes_val is None or bytes_val < 0:
        return ''
    if bytes_val == 0:
        return '0 Bytes'

    suffixes = ['Bytes', 'KB', 'MB', 'GB', 'TB', 'PB']
    i = 0
    while bytes_val >= 1024 and i < len(suffixes) - 1:
        bytes_val /= 1024.0
        i += 1

    return f"{bytes_val:.2f} {suffixes[i]}"
