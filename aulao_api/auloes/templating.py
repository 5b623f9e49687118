import re

from django.template.defaultfilters import linebreaksbr

from .models import EmailTemplate

NOT_INFORMED = 'Não informado'
TO_BE_DEFINED = 'A definir'

PLACEHOLDERS = (
    'TITULO_AULAO',
    'DATA',
    'HORARIO_INICIO',
    'HORARIO_FIM',
    'LOCAL',
    'MATERIA',
    'MINISTRANTE',
    'TOPICOS',
    'MATERIAIS',
)

PLACEHOLDER_RE = re.compile(r'\{(' + '|'.join(PLACEHOLDERS) + r')\}')

DEFAULT_TEMPLATE = {
    'subject': 'Lembrete: {TITULO_AULAO} - {DATA}',
    'body': (
        'Olá!\n\n'
        'Esperamos você no aulão "{TITULO_AULAO}" que acontecerá:\n\n'
        '📅 Data: {DATA}\n'
        '⏰ Horário: {HORARIO_INICIO} às {HORARIO_FIM}\n'
        '📍 Local: {LOCAL}\n'
        '📚 Matéria: {MATERIA}\n'
        '👨‍🏫 Ministrante: {MINISTRANTE}\n\n'
        '🎯 Tópicos que serão abordados:\n{TOPICOS}\n\n'
        '📋 Materiais necessários:\n{MATERIAIS}\n\n'
        'Não se esqueça de trazer sua doação conforme combinado na inscrição.\n\n'
        'Nos vemos lá!'
    ),
    'signature': 'Equipe Aulão Solidário\nEducação que transforma vidas! 💙',
}


def active_template():
    template = EmailTemplate.objects.order_by('-created_at').first()
    if template is None:
        return dict(DEFAULT_TEMPLATE)
    return {'subject': template.subject, 'body': template.body, 'signature': template.signature}


def class_variables(scheduled_class):
    subject = scheduled_class.subject
    teacher = scheduled_class.teacher
    return {
        'TITULO_AULAO': scheduled_class.title,
        'DATA': scheduled_class.date.strftime('%d/%m/%Y'),
        'HORARIO_INICIO': scheduled_class.start_time.strftime('%H:%M'),
        'HORARIO_FIM': scheduled_class.end_time.strftime('%H:%M'),
        'LOCAL': scheduled_class.location,
        'MATERIA': subject.name if subject else NOT_INFORMED,
        'MINISTRANTE': teacher.full_name if teacher else TO_BE_DEFINED,
        'TOPICOS': ', '.join(scheduled_class.topics or []) or NOT_INFORMED,
        'MATERIAIS': scheduled_class.materials_needed or NOT_INFORMED,
    }


def render(text, variables):
    """Replace known ``{TOKEN}`` placeholders in a single pass.

    Substituted values are never scanned again, so user text that happens to
    contain a token is kept literally. Unknown tokens are left untouched.
    """
    return PLACEHOLDER_RE.sub(lambda match: str(variables.get(match.group(1), match.group(0))), text or '')


def render_class_email(scheduled_class, template=None):
    template = template or active_template()
    variables = class_variables(scheduled_class)

    # Header values cannot carry line breaks
    subject = ' '.join(render(template['subject'], variables).split())
    body = render(template['body'], variables)
    if scheduled_class.file_url:
        body += f"\n\n📎 Arquivo do aulão: {scheduled_class.file_url}"

    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">'
        '<div style="text-align: center; margin-bottom: 30px;">'
        '<h1 style="color: #2563eb; margin-bottom: 10px;">Aulão Solidário</h1>'
        '</div>'
        '<div style="background-color: #f8fafc; padding: 20px; border-radius: 8px; margin-bottom: 20px;">'
        f'{linebreaksbr(body, autoescape=True)}</div>'
        '<div style="border-top: 1px solid #e2e8f0; padding-top: 20px; margin-top: 30px; font-size: 14px; color: #64748b;">'
        f'{linebreaksbr(template["signature"], autoescape=True)}</div>'
        '</div>'
    )
    text = f"{body}\n\n{template['signature']}"
    return subject, text, html
