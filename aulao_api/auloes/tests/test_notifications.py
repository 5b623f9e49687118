import uuid
from smtplib import SMTPException
from unittest import mock

import pytest
from django.core.mail import EmailMultiAlternatives

from auloes.exceptions import NotFoundError, PartialFailure
from auloes.notifications import notify_participants


@pytest.mark.django_db
def test_every_participant_gets_an_email(scheduled_class, make_registration, mailoutbox):
    make_registration(student_email='ana@example.com')
    make_registration(student_email='bruno@example.com')

    result = notify_participants(scheduled_class.id)

    assert result.success_count == 2
    assert result.error_count == 0
    assert sorted(m.to[0] for m in mailoutbox) == ['ana@example.com', 'bruno@example.com']
    assert mailoutbox[0].alternatives[0][1] == 'text/html'


@pytest.mark.django_db
def test_class_without_registrations(scheduled_class, mailoutbox):
    result = notify_participants(scheduled_class.id)

    assert result.success_count == 0
    assert result.message == 'No registrations found for this class.'
    assert mailoutbox == []


@pytest.mark.django_db
def test_one_failed_send_does_not_stop_the_rest(scheduled_class, make_registration):
    make_registration(student_email='ana@example.com')
    make_registration(student_email='falha@example.com')
    make_registration(student_email='bruno@example.com')

    def fake_send(message, fail_silently=False):
        if message.to == ['falha@example.com']:
            raise SMTPException('mailbox unavailable')
        return 1

    with mock.patch.object(EmailMultiAlternatives, 'send', autospec=True, side_effect=fake_send) as send:
        with pytest.raises(PartialFailure) as excinfo:
            notify_participants(scheduled_class.id)

    assert send.call_count == 3
    assert excinfo.value.success_count == 2
    assert excinfo.value.error_count == 1


@pytest.mark.django_db
def test_unknown_class():
    with pytest.raises(NotFoundError):
        notify_participants(uuid.uuid4())
