import datetime

import pytest
from django.contrib.auth.hashers import make_password
from django.utils import timezone
from rest_framework.test import APIClient

from auloes.authentication import issue_admin_tokens
from auloes.models import AdminAccount, ClassRegistration, ScheduledClass, Subject


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path / 'media'
    settings.PUBLIC_BASE_URL = 'https://aulao.test'
    return settings.MEDIA_ROOT


@pytest.fixture
def subject(db):
    return Subject.objects.create(name='Matemática', is_scheduled=True)


@pytest.fixture
def scheduled_class(subject):
    return ScheduledClass.objects.create(
        title='Aulão de Cálculo',
        subject=subject,
        date=timezone.localdate() + datetime.timedelta(days=7),
        start_time=datetime.time(14, 0),
        end_time=datetime.time(17, 0),
        location='Bloco A, sala 101',
        max_participants=3,
        topics=['Limites', 'Derivadas'],
    )


@pytest.fixture
def make_registration(scheduled_class):
    def _make(**kwargs):
        fields = {
            'scheduled_class': scheduled_class,
            'student_name': 'Ana Souza',
            'student_email': 'ana@example.com',
            'student_registration_number': '2023001',
        }
        fields.update(kwargs)
        return ClassRegistration.objects.create(**fields)
    return _make


@pytest.fixture
def admin_account(db):
    return AdminAccount.objects.create(
        username='coordenacao',
        full_name='Coordenação Aulão',
        email='coord@example.com',
        password=make_password('segredo123'),
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_client(admin_account):
    client = APIClient()
    _, access = issue_admin_tokens(admin_account)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
    return client
