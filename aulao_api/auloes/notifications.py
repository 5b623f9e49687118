import logging
from dataclasses import dataclass, field
from smtplib import SMTPException

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.mail import EmailMultiAlternatives

from .exceptions import NotFoundError, PartialFailure
from .models import ScheduledClass
from .templating import render_class_email

logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    success_count: int = 0
    error_count: int = 0
    failed_recipients: list = field(default_factory=list)

    @property
    def message(self):
        if not self.success_count and not self.error_count:
            return 'No registrations found for this class.'
        return f"Emails sent to {self.success_count} participants."


def notify_participants(class_id):
    """Email every registered student the class reminder.

    Each recipient is sent independently; when any send fails a
    ``PartialFailure`` with both counts is raised after all sends ran.
    """
    try:
        scheduled_class = ScheduledClass.objects.select_related('subject', 'teacher').get(pk=class_id)
    except (ScheduledClass.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError(f"Class not found: {class_id}")

    recipients = list(scheduled_class.registrations.values_list('student_email', flat=True))
    result = NotificationResult()
    if not recipients:
        return result

    subject, text, html = render_class_email(scheduled_class)

    for email in recipients:
        message = EmailMultiAlternatives(
            subject=subject,
            body=text,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[email],
        )
        message.attach_alternative(html, "text/html")
        try:
            message.send(fail_silently=False)
        except (SMTPException, OSError, ValueError):
            logger.exception("Could not send class %s reminder to %s", scheduled_class.pk, email)
            result.error_count += 1
            result.failed_recipients.append(email)
        else:
            result.success_count += 1

    logger.info(
        "Class %s reminders: %s sent, %s failed", scheduled_class.pk, result.success_count, result.error_count
    )
    if result.error_count:
        raise PartialFailure(result.success_count, result.error_count)
    return result
