# activities/validators.py
import os

from django.conf import settings
from django.core.exceptions import ValidationError

PROOF_DOCUMENT_EXTENSIONS = ('.jpeg', '.jpg', '.png', '.pdf', '.doc', '.docx')
AVATAR_EXTENSIONS = ('.jpeg', '.jpg', '.png')


def _extension(upload):
    return os.path.splitext(upload.name or '')[1].lower()


def validate_proof_document(upload):
    """
    Validate an activity certificate upload.

    Only images, PDF and Word documents are accepted, up to
    PROOF_DOCUMENT_MAX_BYTES.
    """
    if _extension(upload) not in PROOF_DOCUMENT_EXTENSIONS:
        raise ValidationError(
            'Only images (jpeg, jpg, png), PDF and Word documents are allowed'
        )
    if upload.size > settings.PROOF_DOCUMENT_MAX_BYTES:
        limit_mb = settings.PROOF_DOCUMENT_MAX_BYTES // (1024 * 1024)
        raise ValidationError(f'File size must not exceed {limit_mb}MB')


def validate_avatar(upload):
    """Validate a profile picture upload (JPEG or PNG up to AVATAR_MAX_BYTES)"""
    content_type = getattr(upload, 'content_type', '') or ''
    if _extension(upload) not in AVATAR_EXTENSIONS or (content_type and not content_type.startswith('image/')):
        raise ValidationError('Only JPEG and PNG images are allowed')
    if upload.size > settings.AVATAR_MAX_BYTES:
        limit_mb = settings.AVATAR_MAX_BYTES // (1024 * 1024)
        raise ValidationError(f'Image size must not exceed {limit_mb}MB')
