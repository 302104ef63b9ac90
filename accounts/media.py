"""Uploads of resumes and profile pictures through Django's storage API."""

import logging
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage

from portal.exceptions import BadRequest

logger = logging.getLogger(__name__)

UPLOAD_DIRS = {
    'resume': 'resumes',
    'profile_picture': 'profile_pictures',
}


def store_upload(kind, upload):
    """Validate and save an uploaded file, returning its stored location."""
    if kind not in UPLOAD_DIRS:
        raise BadRequest(f"Unknown upload type '{kind}'")
    if upload is None:
        raise BadRequest("No file provided")
    allowed = settings.PORTAL_UPLOAD_CONTENT_TYPES.get(kind, [])
    if upload.content_type not in allowed:
        raise BadRequest(f"Unsupported file type {upload.content_type}. Allowed: {', '.join(allowed)}")
    if upload.size > settings.PORTAL_UPLOAD_MAX_BYTES:
        raise BadRequest(f"File too large. Maximum size is {settings.PORTAL_UPLOAD_MAX_BYTES} bytes")

    extension = os.path.splitext(upload.name)[1].lower()
    name = default_storage.save(f"{UPLOAD_DIRS[kind]}/{uuid.uuid4().hex}{extension}", upload)
    logger.info("Stored %s upload at %s", kind, name)
    return default_storage.url(name)
