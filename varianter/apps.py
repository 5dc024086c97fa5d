from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class VarianterConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "varianter"
    verbose_name = _("Variantes de producto")

    def ready(self):
        from varianter.conf import get_varianter_settings

        # Unknown keys in settings.VARIANTER fail at startup, not on first render.
        get_varianter_settings()
