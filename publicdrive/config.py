import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = 'PUBLICDRIVE_'


def _defaults():
    cwd = Path.cwd()
    return {
        'STORAGE_ROOT': str(cwd / 'public'),
        'VIRTUAL_FOLDERS_FILE': str(cwd / 'virtual-folders.json'),
        'ACCESS_LOG_FILE': str(cwd / 'access-log.json'),
        'ACCESS_LOG_LIMIT': 100,
        'RECENT_FILES_LIMIT': 20,
        'PREVIEW_MAX_DEPTH': 3,
        'VIRTUAL_FOLDER_FALLBACK': True,
        'MAX_CONTENT_LENGTH': 100 * 1024 * 1024,  # 100MB max file size
        'ROOT_LABEL': 'Public Files',
    }


def _coerce(raw, default):
    if isinstance(default, bool):
        return raw.strip().lower() in ('1', 'true', 'yes', 'on')
    if isinstance(default, int):
        return int(raw)
    return raw


def load_config(environ=None):
    """Defaults overlaid with PUBLICDRIVE_* environment variables."""
    environ = os.environ if environ is None else environ
    cfg = _defaults()
    for key, default in cfg.items():
        raw = environ.get(ENV_PREFIX + key)
        if raw is None:
            continue
        try:
            cfg[key] = _coerce(raw, default)
        except ValueError:
            logger.warning(f"Ignoring invalid value for {ENV_PREFIX}{key}: {raw!r}")
    return cfg
