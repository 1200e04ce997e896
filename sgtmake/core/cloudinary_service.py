"""
Cloudinary media service.

Thin wrapper around the Cloudinary SDK used by catalog, hardware, offers,
service requests and the upload endpoints. Assets are always referenced by
their Cloudinary public id in the database.
"""
import io
import logging
import os
import re
from typing import Optional, Dict, Any, List

import cloudinary
import cloudinary.api
import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import Error as CloudinaryError
from django.conf import settings

logger = logging.getLogger(__name__)

CLOUDINARY_CLOUD_NAME = getattr(
    settings,
    'CLOUDINARY_CLOUD_NAME',
    os.getenv('CLOUDINARY_CLOUD_NAME', '')
)

CLOUDINARY_API_KEY = getattr(
    settings,
    'CLOUDINARY_API_KEY',
    os.getenv('CLOUDINARY_API_KEY', '')
)

CLOUDINARY_API_SECRET = getattr(
    settings,
    'CLOUDINARY_API_SECRET',
    os.getenv('CLOUDINARY_API_SECRET', '')
)

# Largest page the Admin API returns for resource listings
MAX_LIST_RESULTS = 500

DELETE_BATCH_SIZE = 100

RAW_FILE_PATTERN = re.compile(r'\.(pdf|docx?|xlsx?|zip|csv|txt|rar|7z)$', re.IGNORECASE)

_configured = False


class MediaStorageError(Exception):
    """Raised when a Cloudinary operation fails"""


def ensure_configured():
    """Configure the SDK from settings once per process"""
    global _configured
    if _configured:
        return
    cloudinary.config(
        cloud_name=CLOUDINARY_CLOUD_NAME,
        api_key=CLOUDINARY_API_KEY,
        api_secret=CLOUDINARY_API_SECRET,
        secure=True,
    )
    _configured = True


def upload_image(file, folder: str, public_id: Optional[str] = None, **options) -> Dict[str, Any]:
    """
    Upload an image to Cloudinary.

    Args:
        file: Uploaded file object, raw bytes, path, remote URL or data URI
        folder: Destination folder
        public_id: Optional explicit public id (relative to folder)
        **options: Extra upload options (format, quality, width, height, crop...)

    Returns:
        dict with `public_id` and `url` (the secure URL)
    """
    ensure_configured()
    if isinstance(file, bytes):
        file = io.BytesIO(file)

    upload_options = {
        'folder': folder,
        'resource_type': 'image',
    }
    if public_id:
        upload_options['public_id'] = public_id
        upload_options['unique_filename'] = False
    upload_options.update(options)

    try:
        result = cloudinary.uploader.upload(file, **upload_options)
    except CloudinaryError as e:
        logger.error(f"Cloudinary upload to '{folder}' failed: {str(e)}")
        raise MediaStorageError(str(e)) from e

    logger.info(f"Uploaded image to Cloudinary: {result.get('public_id')}")
    return {
        'public_id': result.get('public_id'),
        'url': result.get('secure_url') or result.get('url'),
    }


def destroy_image(public_id: str, resource_type: str = 'image') -> Dict[str, Any]:
    """Delete a single asset; raises MediaStorageError on SDK failure"""
    ensure_configured()
    try:
        result = cloudinary.uploader.destroy(public_id, resource_type=resource_type)
    except CloudinaryError as e:
        logger.error(f"Cloudinary destroy of '{public_id}' failed: {str(e)}")
        raise MediaStorageError(str(e)) from e
    logger.info(f"Destroyed Cloudinary asset {public_id}: {result.get('result')}")
    return result


def safe_destroy(public_id: Optional[str]) -> bool:
    """Delete an asset, logging instead of raising. Returns True on success."""
    if not public_id:
        return False
    try:
        destroy_image(public_id)
        return True
    except MediaStorageError as e:
        logger.warning(f"Could not delete image {public_id}: {str(e)}")
        return False


def rename_resource(from_public_id: str, to_public_id: str) -> Dict[str, Any]:
    """Rename (move) an asset to a new public id"""
    ensure_configured()
    try:
        result = cloudinary.uploader.rename(from_public_id, to_public_id)
    except CloudinaryError as e:
        logger.error(f"Cloudinary rename '{from_public_id}' -> '{to_public_id}' failed: {str(e)}")
        raise MediaStorageError(str(e)) from e
    logger.info(f"Renamed Cloudinary asset {from_public_id} -> {to_public_id}")
    return result


def list_resources(prefix: str, max_results: int = MAX_LIST_RESULTS) -> List[Dict[str, Any]]:
    """List uploaded image resources whose public id starts with prefix"""
    ensure_configured()
    resources = []
    next_cursor = None
    try:
        while True:
            params = {
                'type': 'upload',
                'resource_type': 'image',
                'prefix': prefix,
                'max_results': min(max_results, MAX_LIST_RESULTS),
            }
            if next_cursor:
                params['next_cursor'] = next_cursor
            result = cloudinary.api.resources(**params)
            resources.extend(result.get('resources', []) or [])
            next_cursor = result.get('next_cursor')
            if not next_cursor or len(resources) >= max_results:
                break
    except CloudinaryError as e:
        logger.error(f"Cloudinary listing for prefix '{prefix}' failed: {str(e)}")
        raise MediaStorageError(str(e)) from e
    return resources[:max_results]


def delete_resources(public_ids: List[str]) -> int:
    """Delete assets in batches. Returns the number actually deleted."""
    ensure_configured()
    deleted = 0
    for i in range(0, len(public_ids), DELETE_BATCH_SIZE):
        chunk = public_ids[i:i + DELETE_BATCH_SIZE]
        try:
            result = cloudinary.api.delete_resources(chunk, resource_type='image', type='upload')
        except CloudinaryError as e:
            logger.error(f"Cloudinary batch delete failed: {str(e)}")
            raise MediaStorageError(str(e)) from e
        deleted += sum(1 for _, outcome in (result.get('deleted') or {}).items() if outcome == 'deleted')
    return deleted


def delete_folder_resources(prefix: str) -> int:
    """Delete every image stored under a folder prefix"""
    resources = list_resources(prefix)
    public_ids = [resource['public_id'] for resource in resources if resource.get('public_id')]
    if not public_ids:
        return 0
    deleted = delete_resources(public_ids)
    logger.info(f"Deleted {deleted} Cloudinary assets under {prefix}")
    return deleted


def is_raw_file(public_id: str) -> bool:
    """Documents and archives are stored as `raw` resources, everything else as images"""
    return bool(RAW_FILE_PATTERN.search(public_id or ''))


def build_download_url(public_id: str) -> str:
    """Build a secure URL that makes the browser download the asset"""
    ensure_configured()
    resource_type = 'raw' if is_raw_file(public_id) else 'image'
    try:
        url, _options = cloudinary.utils.cloudinary_url(
            public_id,
            resource_type=resource_type,
            flags='attachment',
            secure=True,
        )
    except ValueError as e:
        # raised when no cloud name is configured
        raise MediaStorageError(str(e)) from e
    return url
