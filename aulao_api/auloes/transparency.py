import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.db.models import Sum
from django.utils import timezone

from .exceptions import NotFoundError, PermissionDeniedError, StorageError
from .models import AdminAccount, Donation, Institution, InstitutionDonation, ScheduledClass

logger = logging.getLogger(__name__)

UNTITLED_CLASS = 'Aulão sem título'
INSTITUTION_FIELDS = ('name', 'type', 'contact_info', 'address', 'description')


def _require_admin(admin_id):
    try:
        exists = AdminAccount.objects.filter(pk=admin_id).exists()
    except (ValueError, DjangoValidationError):
        exists = False
    if not exists:
        raise PermissionDeniedError('Only administrators can manage institutions.')


def _get_institution(institution_id):
    try:
        return Institution.objects.get(pk=institution_id)
    except (Institution.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError(f"Institution not found: {institution_id}")


def create_institution(admin_id, data):
    _require_admin(admin_id)
    try:
        institution = Institution.objects.create(**{f: data.get(f) or None for f in INSTITUTION_FIELDS})
    except DatabaseError as exc:
        raise StorageError('Could not create the institution.') from exc
    logger.info("Admin %s created institution %s", admin_id, institution.pk)
    return institution


def update_institution(admin_id, institution_id, data):
    _require_admin(admin_id)
    institution = _get_institution(institution_id)
    for f in INSTITUTION_FIELDS:
        if f in data:
            setattr(institution, f, data[f] or None)
    try:
        institution.save()
    except DatabaseError as exc:
        raise StorageError(f"Could not update institution {institution_id}.") from exc
    logger.info("Admin %s updated institution %s", admin_id, institution.pk)
    return institution


def delete_institution(admin_id, institution_id):
    _require_admin(admin_id)
    institution = _get_institution(institution_id)
    try:
        institution.delete()
    except DatabaseError as exc:
        raise StorageError(f"Could not delete institution {institution_id}.") from exc
    logger.info("Admin %s deleted institution %s", admin_id, institution_id)


def finance_summary():
    """Money donations grouped by class, newest class first."""
    donations = (
        Donation.objects
        .filter(type=Donation.Type.MONEY, amount__gt=0)
        .select_related('scheduled_class')
    )

    total = Decimal('0.00')
    by_class = {}
    for donation in donations:
        scheduled_class = donation.scheduled_class
        key = donation.scheduled_class_id or 'unlinked'
        entry = by_class.setdefault(key, {
            'class_id': str(scheduled_class.pk) if scheduled_class else None,
            'class_title': scheduled_class.title if scheduled_class else UNTITLED_CLASS,
            'class_date': scheduled_class.date if scheduled_class else None,
            'money_amount': Decimal('0.00'),
        })
        entry['money_amount'] += donation.amount
        total += donation.amount

    rows = sorted(
        by_class.values(),
        key=lambda row: (row['class_date'] is not None, row['class_date']),
        reverse=True,
    )
    return {
        'total_money_donations': total,
        'donations_by_class': rows,
        'classes_with_donations': sum(1 for row in rows if row['money_amount'] > 0),
    }


def available_years():
    dates = InstitutionDonation.objects.exclude(donation_date__isnull=True).dates('donation_date', 'year', order='DESC')
    years = [d.year for d in dates]
    return years or [timezone.localdate().year]


def transparency_summary(year):
    donations = list(
        InstitutionDonation.objects
        .filter(donation_date__year=year)
        .select_related('institution')
        .order_by('-donation_date')
    )
    totals = InstitutionDonation.objects.filter(donation_date__year=year).aggregate(
        total_food=Sum('food_weight_kg'),
        total_money=Sum('amount'),
    )
    return {
        'year': year,
        'available_years': available_years(),
        'donations': donations,
        'total_food_kg': totals['total_food'] or Decimal('0'),
        'total_money': totals['total_money'] or Decimal('0'),
        'total_institutions': len({d.institution_id for d in donations if d.institution_id}),
        'total_classes': ScheduledClass.objects.filter(date__year=year).count(),
    }
