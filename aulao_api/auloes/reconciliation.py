"""Attendance to donation-ledger reconciliation.

Marking a registration as attended turns a monetary pledge into exactly one
``dinheiro`` ledger entry. Un-marking attendance never removes ledger
entries: donations are an append-only historical record.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from .exceptions import NotFoundError, StorageError, ValidationError
from .models import ClassRegistration, Donation, PaymentDetail

logger = logging.getLogger(__name__)

MAX_AMOUNT = Decimal('100000000')
CENTS = Decimal('0.01')

LEDGER_CHECK_WARNING = (
    'Attendance recorded, but existing donations for this registration could not be checked.'
)
LEDGER_INSERT_WARNING = (
    'Attendance recorded, but the donation could not be registered automatically.'
)


@dataclass
class AttendanceResult:
    registration: ClassRegistration
    donation: Optional[Donation] = None
    created: bool = False
    warning: Optional[str] = None


def parse_pledge_amount(raw) -> Optional[Decimal]:
    """Parse a pledged amount, returning ``None`` for anything unusable."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite() or abs(amount) >= MAX_AMOUNT:
        return None
    return amount.quantize(CENTS)


def _get_registration(registration_id):
    try:
        return ClassRegistration.objects.get(pk=registration_id)
    except (ClassRegistration.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError(f"Registration not found: {registration_id}")
    except DatabaseError as exc:
        raise StorageError(f"Could not load registration {registration_id}.") from exc


def _find_money_donation(registration):
    return Donation.objects.filter(
        registration_id=registration.id,
        type=Donation.Type.MONEY,
    ).first()


def _insert_money_donation(registration):
    try:
        with transaction.atomic():
            donation = Donation.objects.create(
                scheduled_class_id=registration.scheduled_class_id,
                registration_id=registration.id,
                type=Donation.Type.MONEY,
                amount=parse_pledge_amount(registration.donation_amount),
            )
    except IntegrityError:
        # Another request inserted the entry between our check and insert
        donation = Donation.objects.get(registration_id=registration.id, type=Donation.Type.MONEY)
        return donation, False
    return donation, True


def set_attendance(registration_id, attended: bool) -> AttendanceResult:
    registration = _get_registration(registration_id)

    try:
        ClassRegistration.objects.filter(pk=registration.pk).update(
            attended=attended,
            confirmed_presence=attended,
            updated_at=timezone.now(),
        )
    except DatabaseError as exc:
        raise StorageError(f"Could not update attendance for registration {registration.pk}.") from exc

    registration.attended = attended
    registration.confirmed_presence = attended
    result = AttendanceResult(registration=registration)

    if not attended or not registration.has_monetary_pledge:
        return result

    try:
        result.donation = _find_money_donation(registration)
    except DatabaseError:
        logger.exception("Could not check donations for registration %s", registration.pk)
        result.warning = LEDGER_CHECK_WARNING
        return result

    if result.donation is not None:
        return result

    try:
        result.donation, result.created = _insert_money_donation(registration)
    except DatabaseError:
        logger.exception("Could not record donation for registration %s", registration.pk)
        result.warning = LEDGER_INSERT_WARNING
        return result

    if result.created:
        logger.info(
            "Recorded donation %s (amount=%s) for registration %s",
            result.donation.pk, result.donation.amount, registration.pk,
        )
    return result


def set_presence(registration_id, confirmed: bool) -> ClassRegistration:
    registration = _get_registration(registration_id)

    if not confirmed and registration.attended:
        raise ValidationError(
            'Registration is marked as attended; unmark attendance instead of removing presence.'
        )

    try:
        ClassRegistration.objects.filter(pk=registration.pk).update(
            confirmed_presence=confirmed,
            updated_at=timezone.now(),
        )
    except DatabaseError as exc:
        raise StorageError(f"Could not update presence for registration {registration.pk}.") from exc

    registration.confirmed_presence = confirmed
    return registration


def delete_registration(registration_id):
    """Delete a registration and its payment details, keeping its donations."""
    registration = _get_registration(registration_id)

    try:
        PaymentDetail.objects.filter(registration_id=registration.pk).delete()
        ClassRegistration.objects.filter(pk=registration.pk).delete()
    except DatabaseError as exc:
        raise StorageError(f"Could not delete registration {registration.pk}.") from exc

    logger.info("Deleted registration %s", registration.pk)
    return registration
