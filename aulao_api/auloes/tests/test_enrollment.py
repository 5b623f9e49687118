import datetime
import uuid
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from auloes import enrollment
from auloes.exceptions import NotFoundError, ValidationError
from auloes.models import ClassRegistration, PaymentDetail, PlatformStatistics, ScheduledClass

STUDENT = {
    'student_name': 'Carla Lima',
    'student_email': 'carla@example.com',
    'student_registration_number': '2024010',
}


@pytest.mark.django_db
class TestRegisterStudent:
    def test_plain_registration(self, scheduled_class):
        registration = enrollment.register_student(scheduled_class.id, dict(STUDENT))

        assert registration.scheduled_class_id == scheduled_class.id
        assert registration.donation_type is None
        assert registration.attended is False
        stats = PlatformStatistics.objects.get(year=timezone.localdate().year)
        assert stats.total_students == 1

    def test_full_class_is_rejected(self, scheduled_class, make_registration):
        for i in range(scheduled_class.max_participants):
            make_registration(student_email=f'aluno{i}@example.com')

        with pytest.raises(ValidationError, match='full'):
            enrollment.register_student(scheduled_class.id, dict(STUDENT))

        assert ClassRegistration.objects.count() == scheduled_class.max_participants

    @pytest.mark.parametrize('amount', ['abc', '0', '-5'])
    def test_invalid_monetary_amount(self, scheduled_class, amount):
        data = dict(STUDENT, donation_type='pagamento_hora', donation_amount=amount)

        with pytest.raises(ValidationError):
            enrollment.register_student(scheduled_class.id, data)

    def test_monetary_pledge_without_amount_is_accepted(self, scheduled_class):
        data = dict(STUDENT, donation_type='pagamento_hora', donation_amount='')

        registration = enrollment.register_student(scheduled_class.id, data)

        assert registration.donation_amount is None

    def test_advance_payment_keeps_proof_and_details(self, scheduled_class):
        proof = SimpleUploadedFile('comprovante.png', b'\x89PNG fake', content_type='image/png')
        data = dict(
            STUDENT, donation_type='pagamento_antecipado', donation_amount='10', payment_method='pix'
        )

        registration = enrollment.register_student(scheduled_class.id, data, proof_file=proof)

        assert registration.payment_proof_url.startswith('https://aulao.test/media/payment-proofs/')
        detail = PaymentDetail.objects.get(registration=registration)
        assert detail.amount == Decimal('10.00')
        assert detail.status == 'pending'
        assert detail.proof_file_url == registration.payment_proof_url

    def test_past_class_is_closed(self, scheduled_class):
        scheduled_class.date = timezone.localdate() - datetime.timedelta(days=30)
        scheduled_class.save()

        with pytest.raises(ValidationError, match='not open'):
            enrollment.register_student(scheduled_class.id, dict(STUDENT))

        assert not ClassRegistration.objects.exists()
        assert not PlatformStatistics.objects.exists()

    def test_class_pending_location_is_closed(self, scheduled_class):
        scheduled_class.status = ScheduledClass.Status.PENDING_LOCATION
        scheduled_class.save()

        with pytest.raises(ValidationError, match='not open'):
            enrollment.register_student(scheduled_class.id, dict(STUDENT))

        assert not ClassRegistration.objects.exists()

    def test_unknown_class(self, db):
        with pytest.raises(NotFoundError):
            enrollment.register_student(uuid.uuid4(), dict(STUDENT))


@pytest.mark.django_db
def test_upcoming_classes_only_lists_future_scheduled(scheduled_class, make_registration, subject):
    make_registration()
    ScheduledClass.objects.create(
        title='Aulão passado',
        subject=subject,
        date=timezone.localdate() - datetime.timedelta(days=1),
        start_time=datetime.time(9, 0),
        end_time=datetime.time(11, 0),
    )

    classes = list(enrollment.upcoming_classes())

    assert [c.pk for c in classes] == [scheduled_class.pk]
    assert classes[0].registrations_count == 1
