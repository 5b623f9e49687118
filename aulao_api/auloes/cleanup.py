"""Ordered deletion of a scheduled class and everything hanging off it.

The steps run one after another without an enclosing transaction. Each step
is idempotent, so a deletion that stopped half way can simply be run again.
"""
import logging
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError

from .exceptions import NotFoundError, SessionCleanupError, StorageError
from .models import ClassRegistration, Donation, PaymentDetail, ScheduledClass

logger = logging.getLogger(__name__)


@dataclass
class CleanupReport:
    class_id: str
    completed_steps: list = field(default_factory=list)
    registrations_deleted: int = 0
    payment_details_deleted: int = 0
    donations_unlinked: int = 0


class ScheduledClassCleanup:
    STEPS = (
        'collect_registrations',
        'delete_payment_details',
        'unlink_donations',
        'delete_registrations',
        'delete_class',
    )

    def __init__(self, scheduled_class):
        self.scheduled_class = scheduled_class
        self.registration_ids = []
        self.report = CleanupReport(class_id=str(scheduled_class.pk))

    def run(self):
        for step in self.STEPS:
            try:
                getattr(self, step)()
            except DatabaseError as exc:
                logger.exception(
                    "Class %s deletion failed at step %s (completed: %s)",
                    self.scheduled_class.pk, step, self.report.completed_steps,
                )
                raise SessionCleanupError(step, self.report.completed_steps) from exc
            self.report.completed_steps.append(step)
        return self.report

    def collect_registrations(self):
        self.registration_ids = list(
            ClassRegistration.objects.filter(scheduled_class=self.scheduled_class).values_list('id', flat=True)
        )

    def delete_payment_details(self):
        if not self.registration_ids:
            return
        _, per_model = PaymentDetail.objects.filter(registration_id__in=self.registration_ids).delete()
        self.report.payment_details_deleted = per_model.get(PaymentDetail._meta.label, 0)

    def unlink_donations(self):
        self.report.donations_unlinked = Donation.objects.filter(
            scheduled_class=self.scheduled_class
        ).update(scheduled_class=None)

    def delete_registrations(self):
        _, per_model = ClassRegistration.objects.filter(scheduled_class=self.scheduled_class).delete()
        self.report.registrations_deleted = per_model.get(ClassRegistration._meta.label, 0)

    def delete_class(self):
        ScheduledClass.objects.filter(pk=self.scheduled_class.pk).delete()


def delete_scheduled_class(class_id):
    try:
        scheduled_class = ScheduledClass.objects.get(pk=class_id)
    except (ScheduledClass.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError(f"Class not found: {class_id}")
    except DatabaseError as exc:
        raise StorageError(f"Could not load class {class_id}.") from exc

    report = ScheduledClassCleanup(scheduled_class).run()
    logger.info(
        "Deleted class %s: %s registrations, %s payment details, %s donations unlinked",
        class_id, report.registrations_deleted, report.payment_details_deleted, report.donations_unlinked,
    )
    return report
