from django.apps import AppConfig


class LinkweaverConfig(AppConfig):
    """Configuration for the linkweaver Django app."""

    name = 'linkweaver'
    verbose_name = 'Linkweaver'
