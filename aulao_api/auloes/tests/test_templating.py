import pytest

from auloes import templating
from auloes.models import EmailTemplate


def test_render_is_single_pass():
    text = templating.render('{TITULO_AULAO} em {DATA}', {'TITULO_AULAO': 'Revisão {DATA}', 'DATA': '10/03/2025'})

    assert text == 'Revisão {DATA} em 10/03/2025'


def test_render_keeps_unknown_tokens():
    assert templating.render('Olá {NOME}, {LOCAL}', {'LOCAL': 'Bloco A'}) == 'Olá {NOME}, Bloco A'


@pytest.mark.django_db
class TestRenderClassEmail:
    def test_default_template(self, scheduled_class):
        subject, text, html = templating.render_class_email(scheduled_class)

        date = scheduled_class.date.strftime('%d/%m/%Y')
        assert subject == f'Lembrete: Aulão de Cálculo - {date}'
        assert 'Matéria: Matemática' in text
        assert 'Ministrante: A definir' in text
        assert 'Limites, Derivadas' in text
        assert 'Materiais necessários:\nNão informado' in text
        assert text.endswith(templating.DEFAULT_TEMPLATE['signature'])
        assert '<br>' in html

    def test_stored_template_wins(self, scheduled_class):
        EmailTemplate.objects.create(subject='Aviso {TITULO_AULAO}', body='Local: {LOCAL}', signature='Equipe')

        subject, text, _ = templating.render_class_email(scheduled_class)

        assert subject == 'Aviso Aulão de Cálculo'
        assert text == 'Local: Bloco A, sala 101\n\nEquipe'

    def test_html_escapes_user_text(self, scheduled_class):
        scheduled_class.title = '<b>Física</b>'
        template = {'subject': '{TITULO_AULAO}\nextra', 'body': '{TITULO_AULAO}', 'signature': 'Equipe'}

        subject, _, html = templating.render_class_email(scheduled_class, template)

        assert subject == '<b>Física</b> extra'
        assert '&lt;b&gt;Física&lt;/b&gt;' in html
        assert '<b>Física</b>' not in html

    def test_file_link_is_appended(self, scheduled_class):
        scheduled_class.file_url = 'https://aulao.test/media/class-files/lista.pdf'

        _, text, _ = templating.render_class_email(scheduled_class)

        assert 'https://aulao.test/media/class-files/lista.pdf' in text
