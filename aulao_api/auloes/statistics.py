import logging

from django.db import DatabaseError
from django.db.models import F, Q
from django.utils import timezone

from .models import ClassRegistration, PlatformStatistics, ScheduledClass, Subject, VolunteerTeacher

logger = logging.getLogger(__name__)

STATISTIC_FIELDS = ('total_classes', 'total_students')


def increment_platform_statistic(field, year=None):
    if field not in STATISTIC_FIELDS:
        raise ValueError(f"Unknown statistic: {field}")

    year = year or timezone.localdate().year
    stats, _ = PlatformStatistics.objects.get_or_create(year=year)
    PlatformStatistics.objects.filter(pk=stats.pk).update(
        **{field: F(field) + 1, 'updated_at': timezone.now()}
    )


def bump_statistic_quietly(field):
    """Statistics never block the action that triggered them."""
    try:
        increment_platform_statistic(field)
    except DatabaseError:
        logger.exception("Could not update platform statistic %s", field)


def current_statistics(year=None):
    year = year or timezone.localdate().year
    stats = PlatformStatistics.objects.filter(year=year).first()
    return {
        'year': year,
        'total_classes': stats.total_classes if stats else 0,
        'total_students': stats.total_students if stats else 0,
    }


def dashboard_counters():
    return {
        'pending_teachers': VolunteerTeacher.objects.filter(status=VolunteerTeacher.Status.PENDING).count(),
        'active_classes': ScheduledClass.objects.filter(status=ScheduledClass.Status.SCHEDULED).count(),
        'total_registrations': ClassRegistration.objects.count(),
        'active_subjects': Subject.objects.filter(Q(is_seeking_teachers=True) | Q(is_scheduled=True)).count(),
    }
