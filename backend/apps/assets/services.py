"""
Asset upload service: validation, storage and per-user quota accounting.
"""
import os
import re
import uuid
import logging
from typing import BinaryIO, Iterable, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.db.models.functions import Greatest
from PIL import Image, UnidentifiedImageError

from apps.users.models import User
from .models import Asset, format_file_size
from .providers import get_storage_provider

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    'image/jpeg', 'image/jpg', 'image/png', 'image/gif', 'image/webp', 'image/svg+xml',
    'video/mp4', 'video/webm', 'video/ogg',
}

ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.webp', '.svg', '.mp4', '.webm'}

DANGEROUS_EXTENSIONS = {
    'exe', 'sh', 'bat', 'cmd', 'com', 'pif', 'application', 'gadget', 'msi', 'msp',
    'scr', 'hta', 'cpl', 'msc', 'jar', 'vb', 'vbs', 'js', 'jse', 'ws', 'wsf', 'wsc',
    'wsh', 'ps1', 'ps1xml', 'ps2', 'ps2xml', 'psc1', 'psc2', 'msh', 'msh1', 'msh2',
    'mshxml', 'msh1xml', 'msh2xml', 'php', 'phtml', 'py', 'pl', 'cgi', 'asp', 'aspx',
}

UNSAFE_TEXT_RE = re.compile(r'[<>"\']')


def sanitize_filename(name: str) -> str:
    return re.sub(r'[^a-zA-Z0-9._-]', '_', name)


def sanitize_text(value: str) -> str:
    return UNSAFE_TEXT_RE.sub('', value or '').strip()


def sanitize_folder(folder: Optional[str]) -> str:
    return re.sub(r'[^a-zA-Z0-9_-]', '_', folder or 'uploads')[:100] or 'uploads'


def parse_tags(tags) -> list:
    """Tags arrive as a comma separated string (multipart) or a list (JSON)."""
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(',')
    return [sanitize_text(str(tag)) for tag in tags if sanitize_text(str(tag))]


def asset_type_for(mime_type: str) -> str:
    if mime_type.startswith('image/'):
        return 'image'
    if mime_type.startswith('video/'):
        return 'video'
    if 'pdf' in mime_type or 'document' in mime_type:
        return 'document'
    return 'other'


class ImageProcessor:
    """Read image metadata."""

    @staticmethod
    def get_image_dimensions(file: BinaryIO) -> Tuple[Optional[int], Optional[int]]:
        """Get image width and height; (None, None) when Pillow cannot read it."""
        file.seek(0)
        try:
            with Image.open(file) as img:
                return img.size
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Could not read image dimensions: {e}")
            return None, None
        finally:
            file.seek(0)


class AssetService:
    """
    Upload, delete and account for the assets of one user.
    """

    def __init__(self, user: User):
        self.user = user
        self.provider = get_storage_provider()

    def validate_upload(self, filename: str, content_type: str, size: int) -> None:
        """Raise ValueError describing the first rule the upload breaks."""
        if '..' in filename or '/' in filename or '\\' in filename:
            raise ValueError('Invalid filename: path traversal detected')

        parts = filename.lower().split('.')[1:]
        if any(part in DANGEROUS_EXTENSIONS for part in parts):
            raise ValueError('File contains dangerous extension')

        ext = os.path.splitext(filename)[1].lower()
        if content_type not in ALLOWED_MIME_TYPES or ext not in ALLOWED_EXTENSIONS:
            raise ValueError(f"File type {content_type} or extension {ext} is not allowed")

        max_size = settings.MAX_FILE_SIZE
        if size > max_size:
            raise ValueError(f"File size exceeds maximum allowed size of {max_size / 1024 / 1024:g}MB")

        self.user.refresh_from_db(fields=['storage_used', 'storage_limit'])
        if self.user.storage_used + size > self.user.storage_limit:
            raise ValueError('Storage quota exceeded')

    def _storage_path(self, folder: str, filename: str) -> Tuple[str, str]:
        stored_name = f"{uuid.uuid4().hex}-{sanitize_filename(filename)}"
        return stored_name, f"{folder}/{stored_name}"

    @transaction.atomic
    def upload(
        self,
        file,
        alt: str = '',
        tags=None,
        folder: str = None,
        site=None,
        is_public: bool = True
    ) -> Asset:
        """Validate and store an uploaded file, then record it."""
        filename = file.name
        content_type = (getattr(file, 'content_type', '') or '').lower()
        size = file.size

        try:
            self.validate_upload(filename, content_type, size)
        except ValueError as e:
            logger.warning(f"Upload rejected for {self.user.email}: {filename}: {e}")
            raise

        width = height = None
        asset_type = asset_type_for(content_type)
        if asset_type == 'image' and content_type != 'image/svg+xml':
            width, height = ImageProcessor.get_image_dimensions(file)

        folder = sanitize_folder(folder)
        stored_name, storage_path = self._storage_path(folder, filename)

        file.seek(0)
        result = self.provider.upload(file, storage_path)
        if not result.success:
            logger.error(f"Storing {storage_path} failed: {result.error}")
            raise ValueError('Failed to upload file. Please try again.')

        asset = Asset.objects.create(
            user=self.user,
            site=site,
            filename=stored_name,
            original_name=sanitize_filename(filename),
            url=result.file_url,
            public_id=result.file_path,
            type=asset_type,
            mime_type=content_type,
            size=size,
            width=width,
            height=height,
            alt=sanitize_text(alt)[:200],
            tags=parse_tags(tags),
            folder=folder,
            is_public=is_public,
        )

        User.objects.filter(pk=self.user.pk).update(storage_used=F('storage_used') + size)
        logger.info(f"Asset {asset.id} uploaded by {self.user.email} ({format_file_size(size)})")
        return asset

    @transaction.atomic
    def delete(self, asset: Asset) -> None:
        """Remove the stored file and give the space back."""
        self.provider.delete(asset.public_id)
        size = asset.size
        asset.delete()
        User.objects.filter(pk=self.user.pk).update(
            storage_used=Greatest(F('storage_used') - size, 0)
        )

    def bulk_delete(self, asset_ids: Iterable) -> int:
        ids = []
        for asset_id in asset_ids:
            try:
                ids.append(uuid.UUID(str(asset_id)))
            except ValueError:
                raise ValueError(f"Invalid asset id: {asset_id}")

        assets = list(Asset.objects.filter(user=self.user, id__in=ids))
        for asset in assets:
            self.delete(asset)
        logger.info(f"Bulk deleted {len(assets)} assets for {self.user.email}")
        return len(assets)

    def storage_info(self) -> dict:
        self.user.refresh_from_db(fields=['storage_used', 'storage_limit'])
        used = self.user.storage_used
        limit = self.user.storage_limit
        return {
            'used': used,
            'limit': limit,
            'available': max(0, limit - used),
            'percentage': round(used / limit * 100, 2) if limit else 0,
            'used_formatted': format_file_size(used),
            'limit_formatted': format_file_size(limit),
        }
