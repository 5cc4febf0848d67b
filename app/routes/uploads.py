"""File upload routes using Supabase Storage.

Supports uploading images for:
- Machine photos
- Category banners
- Other site content (banners, phases)
"""

from flask import Blueprint, request, jsonify
import logging

from app.utils import token_required, error_response
from app.services import content as content_service
from app.services import machines as machine_service
from app.services.errors import NotFoundError, PersistenceError, ValidationError
from app.services.storage import (
    upload_machine_image,
    upload_content_image,
    upload_category_image,
    is_storage_configured
)

uploads_bp = Blueprint('uploads', __name__)
logger = logging.getLogger(__name__)

SERVICE_ERRORS = (ValidationError, NotFoundError, PersistenceError)

# Allowed file extensions
IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

# File size limits
MACHINE_IMAGE_MAX_SIZE = 10 * 1024 * 1024  # 10MB
CONTENT_IMAGE_MAX_SIZE = 5 * 1024 * 1024  # 5MB

# Magic bytes for image format detection
# Maps magic byte signatures to (extension_set, mime_type)
IMAGE_SIGNATURES = [
    (b'\x89PNG\r\n\x1a\n', {'png'}, 'image/png'),
    (b'\xff\xd8\xff', {'jpg', 'jpeg'}, 'image/jpeg'),
    (b'GIF87a', {'gif'}, 'image/gif'),
    (b'GIF89a', {'gif'}, 'image/gif'),
    (b'RIFF', {'webp'}, 'image/webp'),  # WebP starts with RIFF....WEBP
]

CONTENT_FOLDERS = {'banner', 'category', 'phase'}


def detect_image_type(file_data: bytes):
    """Detect image type from magic bytes.

    Returns:
        Tuple of (extension_set, mime_type) or (None, None) if unknown.
    """
    if len(file_data) < 12:
        return None, None

    for signature, exts, mime in IMAGE_SIGNATURES:
        if file_data[:len(signature)] == signature:
            # Extra check for WebP: bytes 8-12 must be 'WEBP'
            if 'webp' in exts and file_data[8:12] != b'WEBP':
                continue
            return exts, mime

    return None, None


def allowed_image(filename):
    """Check if file has an allowed image extension."""
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in IMAGE_EXTENSIONS


def get_file_from_request(max_size: int):
    """Extract and validate file from request.

    Returns:
        Tuple of (file_data, filename, content_type, error_response)
        If error: (None, None, None, error_response)
    """
    if 'file' not in request.files:
        return None, None, None, (jsonify({'error': 'No file provided'}), 400)

    file = request.files['file']

    if file.filename == '':
        return None, None, None, (jsonify({'error': 'No file selected'}), 400)

    if not allowed_image(file.filename):
        allowed_types = ', '.join(sorted(IMAGE_EXTENSIONS))
        return None, None, None, (jsonify({
            'error': f'File type not allowed. Allowed: {allowed_types}'
        }), 400)

    file_data = file.read()

    if len(file_data) > max_size:
        max_mb = max_size // (1024 * 1024)
        return None, None, None, (jsonify({
            'error': f'File too large. Maximum size: {max_mb}MB'
        }), 400)

    # Validate magic bytes — don't trust the client's content_type
    detected_exts, detected_mime = detect_image_type(file_data)

    if detected_exts is None:
        return None, None, None, (jsonify({
            'error': 'File does not appear to be a valid image'
        }), 400)

    file_ext = file.filename.rsplit('.', 1)[1].lower()
    if file_ext not in detected_exts:
        return None, None, None, (jsonify({
            'error': f'File extension .{file_ext} does not match actual image format'
        }), 400)

    return file_data, file.filename, detected_mime, None


@uploads_bp.route('/status', methods=['GET'])
def storage_status():
    """Check if storage service is configured."""
    configured = is_storage_configured()
    return jsonify({
        'configured': configured,
        'provider': 'supabase' if configured else None
    }), 200


@uploads_bp.route('/machine-image/<machine_id>', methods=['POST'])
@token_required
def upload_machine_photo(current_user_id, machine_id):
    """Upload a machine photo and add it to the machine's gallery.

    The first photo uploaded also becomes the machine's main image.
    """
    try:
        machine = machine_service.get_machine(machine_id)
    except SERVICE_ERRORS as e:
        return error_response(e)

    file_data, filename, content_type, error = get_file_from_request(MACHINE_IMAGE_MAX_SIZE)
    if error:
        return error

    url, error_msg = upload_machine_image(machine_id, file_data, filename, content_type)
    if error_msg:
        logger.error(f'Machine image upload failed: {error_msg}')
        return jsonify({'error': f'Upload failed: {error_msg}'}), 500

    photos = dict(machine.get('photos') or {})
    photos['gallery'] = list(photos.get('gallery') or []) + [url]
    patch = {'photos': photos}
    if not machine.get('image_url'):
        patch['image_url'] = url
        photos['main'] = url

    try:
        machine_service.update_machine(machine_id, patch)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Image uploaded successfully',
        'url': url
    }), 201


@uploads_bp.route('/category-image/<int:category_id>', methods=['POST'])
@token_required
def upload_category_banner(current_user_id, category_id):
    """Upload a category banner and set it as the category image."""
    file_data, filename, content_type, error = get_file_from_request(CONTENT_IMAGE_MAX_SIZE)
    if error:
        return error

    url, error_msg = upload_category_image(category_id, file_data, filename, content_type)
    if error_msg:
        logger.error(f'Category image upload failed: {error_msg}')
        return jsonify({'error': f'Upload failed: {error_msg}'}), 500

    try:
        content_service.update_category(category_id, {'image_url': url})
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Image uploaded successfully',
        'url': url
    }), 201


@uploads_bp.route('/content-image', methods=['POST'])
@token_required
def upload_site_content_image(current_user_id):
    """Upload an image for a banner, category or phase.

    Form field `folder` selects the content type (default: banner).
    """
    folder = request.form.get('folder', 'banner')
    if folder not in CONTENT_FOLDERS:
        return jsonify({'error': f"Invalid folder '{folder}'"}), 400

    file_data, filename, content_type, error = get_file_from_request(CONTENT_IMAGE_MAX_SIZE)
    if error:
        return error

    url, error_msg = upload_content_image(folder, file_data, filename, content_type)
    if error_msg:
        logger.error(f'Content image upload failed: {error_msg}')
        return jsonify({'error': f'Upload failed: {error_msg}'}), 500

    return jsonify({
        'message': 'Image uploaded successfully',
        'url': url
    }), 201
