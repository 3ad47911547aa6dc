import os
import uuid
from django.conf import settings
from rest_framework import serializers


def generate_customer_id():
    """Return a short, human-readable customer id such as ``CUS8F3A21C4``."""
    return f"CUS{uuid.uuid4().hex[:8].upper()}"


def validate_image_upload(upload):
    """Reject non-image uploads and files above ``MAX_IMAGE_UPLOAD_SIZE``."""
    content_type = getattr(upload, 'content_type', '') or ''
    if not content_type.startswith('image/'):
        raise serializers.ValidationError("Please select an image file.")
    limit = settings.MAX_IMAGE_UPLOAD_SIZE
    if upload.size > limit:
        raise serializers.ValidationError(f"Image size should be less than {limit // (1024 * 1024)}MB.")
    return upload


def file_extension(filename, default='.png'):
    ext = os.path.splitext(filename or '')[1].lower()
    return ext or default
