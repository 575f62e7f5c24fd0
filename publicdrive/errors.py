import errno


class DriveError(Exception):
    """Base class for every failure reported back to the client."""

    status_code = 500
    kind = 'Unknown'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = 'Unexpected error'

    def to_dict(self):
        return {'success': False, 'message': self.message, 'error': self.kind}


class InvalidInput(DriveError):
    status_code = 400
    kind = 'InvalidInput'
    default_message = 'Invalid input'


class PathEscape(DriveError):
    status_code = 403
    kind = 'PathEscape'
    default_message = 'Invalid path'


class ForbiddenOperation(DriveError):
    status_code = 403
    kind = 'ForbiddenOperation'
    default_message = 'Operation not allowed'


class AlreadyExists(DriveError):
    status_code = 409
    kind = 'AlreadyExists'
    default_message = 'Already exists'


class NotFound(DriveError):
    status_code = 404
    kind = 'NotFound'
    default_message = 'Not found'


class ReadOnlyFileSystem(DriveError):
    status_code = 500
    kind = 'ReadOnlyFileSystem'
    default_message = 'File system is read-only'


class Unknown(DriveError):
    pass


def translate_os_error(exc, message=None):
    """Maps an OSError onto the matching DriveError."""
    if exc.errno == errno.EROFS:
        return ReadOnlyFileSystem(message and f'{message}: file system is read-only')
    if exc.errno in (errno.ENOENT, errno.ENOTDIR):
        return NotFound(message)
    if exc.errno == errno.EEXIST:
        return AlreadyExists(message)
    return Unknown(message)
