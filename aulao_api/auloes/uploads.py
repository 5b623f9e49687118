import logging
import os
import re
import uuid

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation
from django.core.files.storage import default_storage

from .exceptions import UploadError, ValidationError

logger = logging.getLogger(__name__)

PHOTO_CONTENT_TYPES = ('image/jpeg', 'image/png', 'image/webp')
ACADEMIC_HISTORY_CONTENT_TYPES = ('application/pdf',)
SAFE_EXTENSION_RE = re.compile(r'\.[a-z0-9]{1,10}')


def build_upload_path(folder, filename):
    base, ext = os.path.splitext(filename or '')
    base = re.sub(r'[^a-z0-9]+', '-', base.lower()).strip('-')[:50]
    ext = ext.lower()
    if not SAFE_EXTENSION_RE.fullmatch(ext):
        ext = ''
    return f"{folder}/{uuid.uuid4()}-{base or 'arquivo'}{ext}"


def public_url(name):
    url = default_storage.url(name)
    if url.startswith('http://') or url.startswith('https://'):
        return url
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{url}"


def validate_upload(uploaded_file, content_types, max_size, label):
    content_type = getattr(uploaded_file, 'content_type', None)
    if content_type not in content_types:
        raise ValidationError(f"{label} must be one of: {', '.join(content_types)}.")
    if uploaded_file.size > max_size:
        raise ValidationError(f"{label} must be at most {max_size // (1024 * 1024)}MB.")


def upload_file(uploaded_file, folder):
    """Store ``uploaded_file`` under ``folder`` and return its public URL."""
    path = build_upload_path(folder, uploaded_file.name)
    try:
        name = default_storage.save(path, uploaded_file)
    except (OSError, SuspiciousFileOperation) as exc:
        logger.exception("Upload of %s to %s failed", uploaded_file.name, folder)
        raise UploadError(f"Could not upload {uploaded_file.name}.") from exc
    return public_url(name)
