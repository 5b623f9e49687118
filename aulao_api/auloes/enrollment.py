import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.db.models import Count
from django.utils import timezone

from .exceptions import NotFoundError, StorageError, ValidationError
from .models import ClassRegistration, PaymentDetail, ScheduledClass
from .reconciliation import parse_pledge_amount
from .statistics import bump_statistic_quietly
from .uploads import upload_file

logger = logging.getLogger(__name__)

PAYMENT_PROOF_FOLDER = 'payment-proofs'


def upcoming_classes():
    return (
        ScheduledClass.objects
        .filter(status=ScheduledClass.Status.SCHEDULED, date__gte=timezone.localdate())
        .select_related('subject', 'teacher')
        .annotate(registrations_count=Count('registrations'))
        .order_by('date', 'start_time')
    )


def _get_class(class_id):
    try:
        return ScheduledClass.objects.get(pk=class_id)
    except (ScheduledClass.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError(f"Class not found: {class_id}")


def register_student(class_id, data, proof_file=None):
    """Sign a student up for a class.

    ``data`` holds the validated registration fields. For monetary pledges a
    non-empty amount must be a positive number; advance payments also get a
    pending payment-detail record, whose failure does not undo the sign-up.
    """
    scheduled_class = _get_class(class_id)

    if (
        scheduled_class.status != ScheduledClass.Status.SCHEDULED
        or scheduled_class.date < timezone.localdate()
    ):
        raise ValidationError('This class is not open for registration.')

    if scheduled_class.registrations.count() >= scheduled_class.max_participants:
        raise ValidationError('This class is already full.')

    donation_type = data.get('donation_type') or None
    donation_amount = (data.get('donation_amount') or '').strip() or None

    amount = None
    if donation_type in ClassRegistration.MONETARY_DONATION_TYPES and donation_amount is not None:
        amount = parse_pledge_amount(donation_amount)
        if amount is None or amount <= 0:
            raise ValidationError(f"Invalid donation amount: {donation_amount}")

    proof_url = upload_file(proof_file, PAYMENT_PROOF_FOLDER) if proof_file else None

    try:
        registration = ClassRegistration.objects.create(
            scheduled_class=scheduled_class,
            student_name=data['student_name'],
            student_email=data['student_email'],
            student_phone=data.get('student_phone') or None,
            student_registration_number=data['student_registration_number'],
            donation_type=donation_type,
            donation_amount=donation_amount,
            payment_method=data.get('payment_method') or None,
            payment_proof_url=proof_url,
        )
    except DatabaseError as exc:
        raise StorageError('Could not save the registration.') from exc

    if donation_type == ClassRegistration.DonationType.PAY_IN_ADVANCE:
        try:
            PaymentDetail.objects.create(
                registration=registration,
                payment_type='dinheiro_antecipado',
                amount=amount,
                proof_file_name=proof_file.name if proof_file else None,
                proof_file_url=proof_url,
                payment_date=timezone.now(),
                status='pending',
            )
        except DatabaseError:
            logger.exception("Could not save payment details for registration %s", registration.pk)

    bump_statistic_quietly('total_students')
    logger.info("Registration %s created for class %s", registration.pk, scheduled_class.pk)
    return registration
