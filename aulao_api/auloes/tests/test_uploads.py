from unittest import mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from auloes import uploads
from auloes.exceptions import UploadError, ValidationError


def test_upload_path_is_unique_and_sanitized():
    first = uploads.build_upload_path('academic-history', 'Histórico Escolar (2024).PDF')
    second = uploads.build_upload_path('academic-history', 'Histórico Escolar (2024).PDF')

    assert first != second
    assert first.startswith('academic-history/')
    assert first.endswith('-hist-rico-escolar-2024.pdf')


def test_upload_path_without_usable_name():
    assert uploads.build_upload_path('photos', '???.jpg').endswith('-arquivo.jpg')


def test_upload_file_returns_public_url(media_root):
    upload = SimpleUploadedFile('lista.pdf', b'%PDF-1.4', content_type='application/pdf')

    url = uploads.upload_file(upload, 'class-files')

    assert url.startswith('https://aulao.test/media/class-files/')
    stored = list((media_root / 'class-files').iterdir())
    assert len(stored) == 1
    assert stored[0].read_bytes() == b'%PDF-1.4'


def test_storage_failure_raises_upload_error():
    upload = SimpleUploadedFile('lista.pdf', b'%PDF-1.4', content_type='application/pdf')

    with mock.patch.object(uploads, 'default_storage') as storage:
        storage.save.side_effect = OSError('disk full')
        with pytest.raises(UploadError):
            uploads.upload_file(upload, 'class-files')


def test_validate_upload_rejects_wrong_type_and_size():
    photo = SimpleUploadedFile('foto.gif', b'GIF89a', content_type='image/gif')
    with pytest.raises(ValidationError):
        uploads.validate_upload(photo, uploads.PHOTO_CONTENT_TYPES, 1024, 'Photo')

    big = SimpleUploadedFile('foto.png', b'x' * 2048, content_type='image/png')
    with pytest.raises(ValidationError):
        uploads.validate_upload(big, uploads.PHOTO_CONTENT_TYPES, 1024, 'Photo')


@pytest.mark.parametrize('filename, suffix', [
    ('notas.ph p', '-notas'),
    ('relatorio.p$hp', '-relatorio'),
    ('apostila.extensaolonga', '-apostila'),
    ('foto.JPEG', '-foto.jpeg'),
])
def test_upload_path_drops_unsafe_extensions(filename, suffix):
    assert uploads.build_upload_path('photos', filename).endswith(suffix)
