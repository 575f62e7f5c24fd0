from .app import create_app
from .errors import (AlreadyExists, DriveError, ForbiddenOperation, InvalidInput,
                     NotFound, PathEscape, ReadOnlyFileSystem, Unknown)
from .manager import DriveManager

__all__ = [
    'create_app',
    'DriveManager',
    'DriveError',
    'InvalidInput',
    'PathEscape',
    'ForbiddenOperation',
    'AlreadyExists',
    'NotFound',
    'ReadOnlyFileSystem',
    'Unknown',
]
