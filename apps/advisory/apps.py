from django.apps import AppConfig


class AdvisoryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.advisory'
    verbose_name = 'Health Advisory Engine'
