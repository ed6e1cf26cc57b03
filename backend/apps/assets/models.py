import uuid

from django.conf import settings
from django.db import models


class Asset(models.Model):
    """
    An uploaded file (image or video) owned by a user.
    """
    TYPE_CHOICES = [
        ('image', 'Image'),
        ('video', 'Video'),
        ('document', 'Document'),
        ('other', 'Other'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='assets'
    )
    site = models.ForeignKey(
        'sites.Site',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assets'
    )

    # Stored name and where it lives
    filename = models.CharField(max_length=255)
    original_name = models.CharField(max_length=255)
    url = models.CharField(max_length=1000)
    public_id = models.CharField(max_length=500)  # Path relative to MEDIA_ROOT

    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='other')
    mime_type = models.CharField(max_length=100)
    size = models.BigIntegerField()  # In bytes
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)

    alt = models.CharField(max_length=200, blank=True)
    tags = models.JSONField(default=list, blank=True)
    folder = models.CharField(max_length=100, default='uploads')

    is_public = models.BooleanField(default=True)
    usage_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'type'], name='asset_user_type_idx'),
            models.Index(fields=['user', 'folder'], name='asset_user_folder_idx'),
        ]

    def __str__(self):
        return self.original_name

    @property
    def size_formatted(self):
        return format_file_size(self.size)


def format_file_size(size):
    """Human-readable file size."""
    size = float(size or 0)
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
