from django.apps import AppConfig


class AuloesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'auloes'
    verbose_name = 'Aulão Solidário'
