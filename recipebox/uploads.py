import os

from flask import Blueprint, current_app, send_from_directory

uploads_bp = Blueprint('uploads', __name__)

UPLOAD_URL_PREFIX = 'uploads'


class UploadError(Exception):
    pass


def stored_filename(filename):
    """Reduce a client-supplied filename to its last path component."""
    name = (filename or '').replace('\\', '/').rsplit('/', 1)[-1].strip()
    if name in ('', '.', '..'):
        raise UploadError(f'unusable upload filename: {filename!r}')
    return name


def save_upload(file):
    """Write an uploaded file into UPLOAD_FOLDER and return its public relative path."""
    name = stored_filename(file.filename)
    folder = current_app.config['UPLOAD_FOLDER']
    try:
        os.makedirs(folder, exist_ok=True)
        file.save(os.path.join(folder, name))
    except OSError as e:
        raise UploadError(f'could not save {name}: {e}') from e
    return f'{UPLOAD_URL_PREFIX}/{name}'


@uploads_bp.route(f'/{UPLOAD_URL_PREFIX}/<path:filename>')
def uploaded_file(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
