import uuid
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from auloes import reconciliation
from auloes.exceptions import NotFoundError, StorageError, ValidationError
from auloes.models import ClassRegistration, Donation, PaymentDetail


@pytest.mark.parametrize('raw, expected', [
    ('3', Decimal('3.00')),
    ('3.00', Decimal('3.00')),
    (' 12.5 ', Decimal('12.50')),
    ('', None),
    (None, None),
    ('abc', None),
    ('1,50', None),
    ('NaN', None),
    ('Infinity', None),
    ('1e9', None),
])
def test_parse_pledge_amount(raw, expected):
    assert reconciliation.parse_pledge_amount(raw) == expected


@pytest.mark.django_db
class TestSetAttendance:
    def test_monetary_pledge_creates_one_money_donation(self, make_registration):
        registration = make_registration(donation_type='pagamento_hora', donation_amount='3.00')

        result = reconciliation.set_attendance(registration.id, True)

        assert result.created is True
        assert result.warning is None
        donation = Donation.objects.get(registration_id=registration.id)
        assert donation.type == Donation.Type.MONEY
        assert donation.amount == Decimal('3.00')
        assert donation.scheduled_class_id == registration.scheduled_class_id

        registration.refresh_from_db()
        assert registration.attended is True
        assert registration.confirmed_presence is True

    def test_marking_twice_keeps_a_single_entry(self, make_registration):
        registration = make_registration(donation_type='pagamento_antecipado', donation_amount='10')

        first = reconciliation.set_attendance(registration.id, True)
        second = reconciliation.set_attendance(registration.id, True)

        assert first.created is True
        assert second.created is False
        assert second.donation.pk == first.donation.pk
        assert Donation.objects.filter(registration_id=registration.id).count() == 1

    def test_unmarking_keeps_the_ledger_entry(self, make_registration):
        registration = make_registration(donation_type='pagamento_hora', donation_amount='3.00')
        reconciliation.set_attendance(registration.id, True)

        result = reconciliation.set_attendance(registration.id, False)

        assert result.donation is None
        assert Donation.objects.filter(registration_id=registration.id).count() == 1
        registration.refresh_from_db()
        assert registration.attended is False
        assert registration.confirmed_presence is False

    def test_remarking_after_unmark_does_not_duplicate(self, make_registration):
        registration = make_registration(donation_type='pagamento_hora', donation_amount='3.00')
        reconciliation.set_attendance(registration.id, True)
        reconciliation.set_attendance(registration.id, False)
        reconciliation.set_attendance(registration.id, True)

        assert Donation.objects.filter(registration_id=registration.id).count() == 1

    def test_advance_payment_round_trip(self, make_registration):
        registration = make_registration(donation_type='pagamento_antecipado', donation_amount='3.00')

        reconciliation.set_attendance(registration.id, True)
        reconciliation.set_attendance(registration.id, True)
        reconciliation.set_attendance(registration.id, False)

        donation = Donation.objects.get(registration_id=registration.id)
        assert donation.type == Donation.Type.MONEY
        assert donation.amount == Decimal('3.00')
        assert ClassRegistration.objects.get(pk=registration.pk).attended is False

    def test_food_pledge_never_touches_the_ledger(self, make_registration):
        registration = make_registration(donation_type='alimento', donation_amount='2')

        result = reconciliation.set_attendance(registration.id, True)

        assert result.donation is None
        assert not Donation.objects.exists()

    def test_registration_without_pledge(self, make_registration):
        registration = make_registration()

        reconciliation.set_attendance(registration.id, True)

        assert not Donation.objects.exists()

    @pytest.mark.parametrize('amount', ['abc', '', None])
    def test_unusable_amount_is_recorded_as_null(self, make_registration, amount):
        registration = make_registration(donation_type='pagamento_hora', donation_amount=amount)

        result = reconciliation.set_attendance(registration.id, True)

        assert result.created is True
        assert result.donation.amount is None

    def test_insert_race_returns_existing_entry(self, make_registration):
        registration = make_registration(donation_type='pagamento_hora', donation_amount='5')
        existing = Donation.objects.create(
            registration_id=registration.id, type=Donation.Type.MONEY, amount=Decimal('5.00')
        )

        # The other request's insert is not visible to our check
        with mock.patch.object(reconciliation, '_find_money_donation', return_value=None):
            result = reconciliation.set_attendance(registration.id, True)

        assert result.created is False
        assert result.donation.pk == existing.pk
        assert Donation.objects.filter(registration_id=registration.id).count() == 1

    def test_failed_attendance_update_skips_the_ledger(self, make_registration):
        registration = make_registration(donation_type='pagamento_hora', donation_amount='3')

        with mock.patch.object(ClassRegistration.objects, 'filter', side_effect=DatabaseError('down')):
            with pytest.raises(StorageError):
                reconciliation.set_attendance(registration.id, True)

        assert not Donation.objects.exists()
        assert ClassRegistration.objects.get(pk=registration.pk).attended is False

    def test_ledger_check_failure_still_records_attendance(self, make_registration):
        registration = make_registration(donation_type='pagamento_hora', donation_amount='3')

        with mock.patch.object(reconciliation, '_find_money_donation', side_effect=DatabaseError('down')):
            result = reconciliation.set_attendance(registration.id, True)

        assert result.warning == reconciliation.LEDGER_CHECK_WARNING
        assert ClassRegistration.objects.get(pk=registration.pk).attended is True

    def test_ledger_insert_failure_still_records_attendance(self, make_registration):
        registration = make_registration(donation_type='pagamento_hora', donation_amount='3')

        with mock.patch.object(reconciliation, '_insert_money_donation', side_effect=DatabaseError('down')):
            result = reconciliation.set_attendance(registration.id, True)

        assert result.warning == reconciliation.LEDGER_INSERT_WARNING
        assert result.donation is None
        assert ClassRegistration.objects.get(pk=registration.pk).attended is True

    @pytest.mark.parametrize('registration_id', [uuid.uuid4(), 'not-a-uuid'])
    def test_unknown_registration(self, registration_id):
        with pytest.raises(NotFoundError):
            reconciliation.set_attendance(registration_id, True)


@pytest.mark.django_db
class TestSetPresence:
    def test_confirm_presence_without_attendance(self, make_registration):
        registration = make_registration()

        updated = reconciliation.set_presence(registration.id, True)

        assert updated.confirmed_presence is True
        assert ClassRegistration.objects.get(pk=registration.pk).attended is False

    def test_cannot_unconfirm_an_attended_registration(self, make_registration):
        registration = make_registration(attended=True, confirmed_presence=True)

        with pytest.raises(ValidationError):
            reconciliation.set_presence(registration.id, False)

        assert ClassRegistration.objects.get(pk=registration.pk).confirmed_presence is True


@pytest.mark.django_db
class TestDeleteRegistration:
    def test_donations_outlive_the_registration(self, make_registration):
        registration = make_registration(donation_type='pagamento_antecipado', donation_amount='20')
        PaymentDetail.objects.create(registration=registration, amount=Decimal('20.00'))
        reconciliation.set_attendance(registration.id, True)

        reconciliation.delete_registration(registration.id)

        assert not ClassRegistration.objects.filter(pk=registration.pk).exists()
        assert not PaymentDetail.objects.exists()
        donation = Donation.objects.get(registration_id=registration.id)
        assert donation.amount == Decimal('20.00')

    def test_deleting_twice_reports_not_found(self, make_registration):
        registration = make_registration()
        reconciliation.delete_registration(registration.id)

        with pytest.raises(NotFoundError):
            reconciliation.delete_registration(registration.id)
