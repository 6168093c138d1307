from django.apps import AppConfig


class KhajiitWaresConfig(AppConfig):
    name = "khajiit_wares"
    verbose_name = "Khajiit has wares"
    default_auto_field = "django.db.models.BigAutoField"
