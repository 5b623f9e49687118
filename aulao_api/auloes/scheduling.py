import logging

from django.db import DatabaseError

from .exceptions import StorageError, UploadError
from .models import UNDEFINED_LOCATION, ScheduledClass
from .statistics import bump_statistic_quietly
from .uploads import upload_file

logger = logging.getLogger(__name__)

CLASS_FILES_FOLDER = 'class-files'
FILE_UPLOAD_WARNING = 'Class saved, but the file could not be uploaded.'


def parse_topics(value):
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(',')
    return [topic.strip() for topic in value if topic and topic.strip()]


def normalize_location(value):
    location = (value or '').strip()
    return location or UNDEFINED_LOCATION


def _attach_file(scheduled_class, material_file):
    try:
        scheduled_class.file_url = upload_file(material_file, CLASS_FILES_FOLDER)
    except UploadError:
        return FILE_UPLOAD_WARNING
    scheduled_class.save(update_fields=['file_url', 'updated_at'])
    return None


def create_class(data, material_file=None):
    """Schedule a class. Returns ``(scheduled_class, warning)``."""
    fields = dict(data)
    fields['topics'] = parse_topics(fields.get('topics'))
    fields['location'] = normalize_location(fields.get('location'))
    fields.setdefault('status', ScheduledClass.Status.SCHEDULED)

    try:
        scheduled_class = ScheduledClass.objects.create(**fields)
    except DatabaseError as exc:
        raise StorageError('Could not schedule the class.') from exc

    warning = _attach_file(scheduled_class, material_file) if material_file else None
    bump_statistic_quietly('total_classes')
    logger.info("Class %s scheduled for %s", scheduled_class.pk, scheduled_class.date)
    return scheduled_class, warning


def update_class(scheduled_class, data, material_file=None):
    if material_file:
        # Unlike creation, an upload failure here aborts the edit
        data = dict(data, file_url=upload_file(material_file, CLASS_FILES_FOLDER))

    for name, value in data.items():
        if name == 'topics':
            value = parse_topics(value)
        elif name == 'location':
            value = normalize_location(value)
        setattr(scheduled_class, name, value)

    try:
        scheduled_class.save()
    except DatabaseError as exc:
        raise StorageError(f"Could not update class {scheduled_class.pk}.") from exc
    return scheduled_class
