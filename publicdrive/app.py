import logging
from pathlib import Path

from flask import Blueprint, Flask, current_app, jsonify, request, send_file
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from .config import load_config
from .errors import DriveError, InvalidInput, Unknown
from .manager import DriveManager
from .page import INDEX_HTML
from .tree import format_bytes

logger = logging.getLogger(__name__)

bp = Blueprint('drive', __name__)


def get_manager():
    """A fresh manager per request, so each request sees current disk state."""
    return DriveManager.from_config(current_app.config)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput('Request body must be a JSON object')
    return data


@bp.route('/')
def index():
    """Serves the main HTML interface."""
    return INDEX_HTML


@bp.route('/api/public-folders')
def list_tree():
    """Returns the merged folder tree, from the root or from ?path=."""
    tree = get_manager().list_tree(request.args.get('path'))
    return jsonify(tree)


@bp.route('/api/public-files')
def list_files():
    """Depth-bounded listing; ?flat=true returns files only."""
    flat = request.args.get('flat') == 'true'
    data = get_manager().preview(flat=flat)
    return jsonify({
        'success': True,
        'type': 'flat' if flat else 'hierarchical',
        'data': data,
    })


@bp.route('/api/folders', methods=['POST'])
def create_folder():
    """Creates a new folder."""
    data = _json_body()
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        raise InvalidInput('Folder name is required')

    parent_path = data.get('parentPath') or ''
    if not isinstance(parent_path, str):
        raise InvalidInput('Parent path must be a string')

    result = get_manager().create_folder(name, parent_path)
    return jsonify({'success': True, 'message': f"Created folder {result['folderName']}", **result})


@bp.route('/api/upload', methods=['POST'])
def upload_file():
    """Handles file uploads."""
    if 'file' not in request.files:
        raise InvalidInput('No file provided')

    file = request.files['file']
    if not file.filename:
        raise InvalidInput('No file selected')

    result = get_manager().upload(file, file.filename, request.form.get('path', ''))
    return jsonify({'success': True, 'message': 'File uploaded successfully', **result})


@bp.route('/api/delete-file', methods=['DELETE'])
def delete_file():
    """Deletes a single file."""
    path = request.args.get('path')
    if not path:
        raise InvalidInput('File path is required')

    deleted = get_manager().delete_file(path)
    return jsonify({'success': True, 'message': 'File deleted successfully', 'path': deleted})


@bp.route('/api/delete-folder', methods=['DELETE'])
def delete_folder():
    """Deletes a folder and everything under it."""
    path = request.args.get('path')
    if path is None:
        raise InvalidInput('Folder path is required')

    deleted = get_manager().delete_folder(path)
    return jsonify({'success': True, 'message': 'Folder deleted successfully', 'path': deleted})


@bp.route('/api/remove-all', methods=['DELETE'])
def remove_all():
    """Removes every file and folder under the storage root."""
    get_manager().clear_all()
    return jsonify({
        'success': True,
        'message': 'All files and folders removed successfully',
        'cleared': 'storage root contents',
    })


@bp.route('/api/track-access', methods=['GET', 'POST'])
def track_access():
    """Records a file open (POST) or returns the raw access log (GET)."""
    manager = get_manager()
    if request.method == 'GET':
        return jsonify(manager.access_log.read_all())

    data = _json_body()
    file_path = data.get('filePath')
    file_name = data.get('fileName')
    if not file_path or not file_name:
        raise InvalidInput('File path and name are required')
    if not isinstance(file_path, str) or not isinstance(file_name, str):
        raise InvalidInput('File path and name must be strings')

    size = data.get('size')
    recorded = manager.record_access(file_path, file_name, size if isinstance(size, int) else 0)
    return jsonify({'success': True, 'recorded': recorded})


@bp.route('/api/recent-files')
def recent_files():
    """Recently opened files, falling back to the most recently modified ones."""
    files = get_manager().recent_files()
    for item in files:
        item['sizeLabel'] = format_bytes(item['size'])
    return jsonify(files)


@bp.route('/api/download')
def download_file():
    """Sends a stored file and records the access."""
    manager = get_manager()
    relative, full_path = manager.open_file(request.args.get('path', ''))
    manager.record_access(relative, full_path.name, full_path.stat().st_size)
    inline = request.args.get('inline') == 'true'
    return send_file(str(full_path), as_attachment=not inline, download_name=full_path.name)


def handle_drive_error(e):
    return jsonify(e.to_dict()), e.status_code


def handle_too_large(e):
    limit = format_bytes(current_app.config.get('MAX_CONTENT_LENGTH'))
    return jsonify({'success': False, 'message': f'File exceeds the {limit} upload limit',
                    'error': 'InvalidInput'}), 413


def handle_unexpected(e):
    if isinstance(e, HTTPException):
        return e
    logger.error(f"Unhandled error on {request.path}: {e}", exc_info=True)
    return handle_drive_error(Unknown(str(e)))


def create_app(test_config=None):
    """Builds the Flask app; `test_config` overrides the environment-derived config."""
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    if test_config:
        app.config.from_mapping(test_config)

    root = Path(app.config['STORAGE_ROOT'])
    try:
        root.mkdir(exist_ok=True, parents=True)
    except OSError as e:
        logger.warning(f"Could not create storage root {root}: {e}")

    app.register_blueprint(bp)
    app.register_error_handler(DriveError, handle_drive_error)
    app.register_error_handler(RequestEntityTooLarge, handle_too_large)
    app.register_error_handler(Exception, handle_unexpected)
    return app
