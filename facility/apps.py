from django.apps import AppConfig


class FacilityConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'facility'
    verbose_name = 'Hospital facility'

    def ready(self) -> None:
        # Register cache invalidation / broadcast hooks
        from . import signals  # noqa: F401
