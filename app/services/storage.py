"""Supabase Storage Service for machine and site content images.

Buckets:
- machines: Machine photos, one folder per machine id (public)
- content: Banner, category and phase images (public)
"""

import os
import logging
import time
from uuid import uuid4
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

MACHINES_BUCKET = 'machines'
CONTENT_BUCKET = 'content'

# Supabase client (lazy initialization)
_supabase_client = None


def get_supabase_client():
    """Get or create Supabase client (lazy initialization)."""
    global _supabase_client

    if _supabase_client is None:
        url = os.getenv('SUPABASE_URL')
        key = os.getenv('SUPABASE_SERVICE_KEY')

        if not url or not key:
            logger.warning('Supabase credentials not configured. Storage will not work.')
            return None

        try:
            from supabase import create_client
            _supabase_client = create_client(url, key)
            logger.info('Supabase client initialized successfully')
        except Exception as e:
            logger.error(f'Failed to initialize Supabase client: {e}')
            return None

    return _supabase_client


def is_storage_configured() -> bool:
    """Check if Supabase storage is properly configured."""
    return get_supabase_client() is not None


def _file_extension(file_name: str) -> str:
    return file_name.rsplit('.', 1)[-1].lower() if '.' in file_name else 'jpg'


def upload_file(
    bucket: str,
    path: str,
    file_data: bytes,
    content_type: str = 'image/jpeg'
) -> Tuple[Optional[str], Optional[str]]:
    """Upload a file to Supabase Storage.

    Args:
        bucket: Storage bucket name ('machines', 'content')
        path: Object path inside the bucket
        file_data: Raw file bytes
        content_type: MIME type of the file

    Returns:
        Tuple of (public_url, error_message)
        If successful: (url, None)
        If failed: (None, error_message)
    """
    client = get_supabase_client()

    if client is None:
        return None, 'Storage service not configured'

    try:
        logger.info(f'Uploading file to {bucket}/{path} ({content_type})')

        client.storage.from_(bucket).upload(
            path=path,
            file=file_data,
            file_options={"content-type": content_type}
        )

        public_url = client.storage.from_(bucket).get_public_url(path)

        logger.info(f'File uploaded successfully: {public_url}')
        return public_url, None

    except Exception as e:
        error_msg = str(e)
        logger.error(f'Upload failed: {error_msg}')
        return None, error_msg


def object_path_from_url(bucket: str, file_url: str) -> Optional[str]:
    """Return the object path of a public URL in `bucket`, or None.

    Only URLs served by the configured Supabase project are recognized;
    external images (e.g. stock photos) have no object to delete.
    """
    base = os.getenv('SUPABASE_URL', '').rstrip('/')
    marker = f'/storage/v1/object/public/{bucket}/'
    if not base or not file_url.startswith(base) or marker not in file_url:
        return None
    return file_url.split(marker, 1)[1].split('?', 1)[0]


def delete_file(bucket: str, file_url: str) -> Tuple[bool, Optional[str]]:
    """Delete a file from Supabase Storage.

    Args:
        bucket: Storage bucket name
        file_url: Full public URL of the object

    Returns:
        Tuple of (success, error_message). URLs outside the project's
        storage are skipped and count as success.
    """
    path = object_path_from_url(bucket, file_url)
    if path is None:
        logger.info(f'Skipping delete of external file: {file_url}')
        return True, None

    client = get_supabase_client()

    if client is None:
        return False, 'Storage service not configured'

    try:
        logger.info(f'Deleting file from {bucket}/{path}')
        client.storage.from_(bucket).remove([path])
        logger.info(f'File deleted successfully: {path}')
        return True, None

    except Exception as e:
        error_msg = str(e)
        logger.error(f'Delete failed: {error_msg}')
        return False, error_msg


def delete_folder(bucket: str, folder: str) -> Tuple[bool, Optional[str]]:
    """Delete every object directly under `folder`."""
    client = get_supabase_client()

    if client is None:
        return False, 'Storage service not configured'

    try:
        entries = client.storage.from_(bucket).list(folder)
        paths = [f"{folder}/{entry['name']}" for entry in entries]
        if paths:
            client.storage.from_(bucket).remove(paths)
        logger.info(f'Deleted {len(paths)} files from {bucket}/{folder}')
        return True, None

    except Exception as e:
        error_msg = str(e)
        logger.error(f'Folder delete failed: {error_msg}')
        return False, error_msg


def upload_machine_image(machine_id: str, file_data: bytes, file_name: str, content_type: str = 'image/jpeg') -> Tuple[Optional[str], Optional[str]]:
    """Upload a machine photo into the machine's folder."""
    path = f'{machine_id}/{uuid4().hex}.{_file_extension(file_name)}'
    return upload_file(MACHINES_BUCKET, path, file_data, content_type)


def upload_content_image(folder: str, file_data: bytes, file_name: str, content_type: str = 'image/jpeg') -> Tuple[Optional[str], Optional[str]]:
    """Upload a banner/category/phase image under `folder`."""
    path = f'{folder}/{int(time.time() * 1000)}-{uuid4().hex[:8]}.{_file_extension(file_name)}'
    return upload_file(CONTENT_BUCKET, path, file_data, content_type)


def upload_category_image(category_id, file_data: bytes, file_name: str, content_type: str = 'image/jpeg') -> Tuple[Optional[str], Optional[str]]:
    """Upload a category banner image."""
    path = f'categories/{category_id}/banner_{int(time.time() * 1000)}.{_file_extension(file_name)}'
    return upload_file(CONTENT_BUCKET, path, file_data, content_type)


def delete_machine_images(machine_id: str) -> Tuple[bool, Optional[str]]:
    """Delete every photo stored for a machine."""
    return delete_folder(MACHINES_BUCKET, machine_id)
