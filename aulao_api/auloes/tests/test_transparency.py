import datetime
import uuid
from decimal import Decimal

import pytest
from django.utils import timezone

from auloes import statistics, transparency
from auloes.exceptions import NotFoundError, PermissionDeniedError
from auloes.models import Donation, Institution, InstitutionDonation, ScheduledClass


@pytest.mark.django_db
class TestFinanceSummary:
    def test_groups_money_by_class(self, scheduled_class, subject):
        older = ScheduledClass.objects.create(
            title='Aulão de Física',
            subject=subject,
            date=scheduled_class.date - datetime.timedelta(days=30),
            start_time=datetime.time(8, 0),
            end_time=datetime.time(10, 0),
        )
        Donation.objects.create(scheduled_class=scheduled_class, type='dinheiro', amount=Decimal('3.00'))
        Donation.objects.create(scheduled_class=scheduled_class, type='dinheiro', amount=Decimal('7.50'))
        Donation.objects.create(scheduled_class=older, type='dinheiro', amount=Decimal('5.00'))
        Donation.objects.create(type='dinheiro', amount=Decimal('2.00'))
        # Not counted
        Donation.objects.create(scheduled_class=scheduled_class, type='dinheiro', amount=None)
        Donation.objects.create(scheduled_class=scheduled_class, type='dinheiro', amount=Decimal('0'))
        Donation.objects.create(scheduled_class=scheduled_class, type='alimento', food_weight_kg=Decimal('4'))

        summary = transparency.finance_summary()

        assert summary['total_money_donations'] == Decimal('17.50')
        assert summary['classes_with_donations'] == 3
        rows = summary['donations_by_class']
        assert [row['class_title'] for row in rows] == [
            'Aulão de Cálculo', 'Aulão de Física', transparency.UNTITLED_CLASS,
        ]
        assert rows[0]['money_amount'] == Decimal('10.50')
        assert rows[2]['class_id'] is None

    def test_empty_ledger(self, db):
        summary = transparency.finance_summary()

        assert summary == {
            'total_money_donations': Decimal('0.00'),
            'donations_by_class': [],
            'classes_with_donations': 0,
        }


@pytest.mark.django_db
class TestInstitutions:
    def test_admin_can_manage_institutions(self, admin_account):
        institution = transparency.create_institution(
            admin_account.id, {'name': 'Lar São José', 'type': 'Abrigo', 'address': ''}
        )
        assert institution.address is None

        updated = transparency.update_institution(admin_account.id, institution.id, {'contact_info': '3333-0000'})
        assert updated.contact_info == '3333-0000'
        assert updated.name == 'Lar São José'

        transparency.delete_institution(admin_account.id, institution.id)
        assert not Institution.objects.exists()

    def test_unknown_admin_is_rejected(self, db):
        with pytest.raises(PermissionDeniedError):
            transparency.create_institution(uuid.uuid4(), {'name': 'Lar', 'type': 'Abrigo'})
        assert not Institution.objects.exists()

    def test_missing_institution(self, admin_account):
        with pytest.raises(NotFoundError):
            transparency.delete_institution(admin_account.id, uuid.uuid4())


@pytest.mark.django_db
def test_transparency_summary_totals_one_year(scheduled_class):
    year = scheduled_class.date.year
    lar = Institution.objects.create(name='Lar São José', type='Abrigo')
    banco = Institution.objects.create(name='Banco de Alimentos', type='ONG')
    InstitutionDonation.objects.create(
        institution=lar, type='alimentos', food_weight_kg=Decimal('12.5'), donation_date=datetime.date(year, 3, 1)
    )
    InstitutionDonation.objects.create(
        institution=banco, type='dinheiro', amount=Decimal('150.00'), donation_date=datetime.date(year, 4, 1)
    )
    InstitutionDonation.objects.create(
        institution=lar, type='dinheiro', amount=Decimal('99.00'), donation_date=datetime.date(year - 1, 4, 1)
    )

    summary = transparency.transparency_summary(year)

    assert summary['total_food_kg'] == Decimal('12.5')
    assert summary['total_money'] == Decimal('150.00')
    assert summary['total_institutions'] == 2
    assert summary['total_classes'] == 1
    assert len(summary['donations']) == 2
    assert summary['available_years'] == [year, year - 1]


@pytest.mark.django_db
def test_available_years_defaults_to_current(db):
    assert transparency.available_years() == [timezone.localdate().year]


@pytest.mark.django_db
class TestStatistics:
    def test_increment_creates_the_year_row(self):
        statistics.increment_platform_statistic('total_classes', year=2024)
        statistics.increment_platform_statistic('total_classes', year=2024)

        assert statistics.current_statistics(2024) == {'year': 2024, 'total_classes': 2, 'total_students': 0}

    def test_unknown_statistic(self):
        with pytest.raises(ValueError):
            statistics.increment_platform_statistic('total_teachers')

    def test_dashboard_counters(self, scheduled_class, make_registration):
        make_registration()

        counters = statistics.dashboard_counters()

        assert counters['active_classes'] == 1
        assert counters['total_registrations'] == 1
        assert counters['active_subjects'] == 1
        assert counters['pending_teachers'] == 0
