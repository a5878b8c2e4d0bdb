from django.apps import AppConfig


class KermessesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "kermesses"

    def ready(self) -> None:
        from kermesses import signals  # noqa: F401
