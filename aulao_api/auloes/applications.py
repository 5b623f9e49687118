import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError

from .exceptions import NotFoundError, StorageError, ValidationError
from .models import VolunteerTeacher
from .uploads import (
    ACADEMIC_HISTORY_CONTENT_TYPES,
    PHOTO_CONTENT_TYPES,
    upload_file,
    validate_upload,
)

logger = logging.getLogger(__name__)

PHOTO_FOLDER = 'photos'
ACADEMIC_HISTORY_FOLDER = 'academic-history'


def submit_application(data, photo=None, academic_history=None):
    """Create a pending volunteer teacher from the public application form."""
    if academic_history is None:
        raise ValidationError('Academic history is required.')

    validate_upload(
        academic_history, ACADEMIC_HISTORY_CONTENT_TYPES, settings.MAX_ACADEMIC_HISTORY_SIZE, 'Academic history'
    )
    if photo is not None:
        validate_upload(photo, PHOTO_CONTENT_TYPES, settings.MAX_PHOTO_SIZE, 'Photo')

    photo_url = upload_file(photo, PHOTO_FOLDER) if photo is not None else None
    academic_history_url = upload_file(academic_history, ACADEMIC_HISTORY_FOLDER)

    try:
        teacher = VolunteerTeacher.objects.create(
            full_name=data['full_name'],
            email=data['email'],
            phone=data['phone'],
            university=data['university'],
            course=data['course'],
            availability=data['availability'],
            subjects_can_teach=list(data['subjects']),
            motivation=data.get('motivation') or None,
            experience_level=data.get('experience_level') or None,
            registration_number=data['registration_number'],
            photo_url=photo_url,
            academic_history_url=academic_history_url,
            status=VolunteerTeacher.Status.PENDING,
            approved=False,
        )
    except DatabaseError as exc:
        raise StorageError('Could not save the application.') from exc

    logger.info("Teacher application %s received", teacher.pk)
    return teacher


def set_teacher_status(teacher_id, status):
    if status not in (VolunteerTeacher.Status.APPROVED, VolunteerTeacher.Status.REJECTED):
        raise ValidationError(f"Invalid status: {status}")

    try:
        teacher = VolunteerTeacher.objects.get(pk=teacher_id)
    except (VolunteerTeacher.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError(f"Teacher not found: {teacher_id}")

    teacher.status = status
    teacher.approved = status == VolunteerTeacher.Status.APPROVED
    teacher.save(update_fields=['status', 'approved', 'updated_at'])
    return teacher
