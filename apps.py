from django.apps import AppConfig


class TallymanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tallyman"
    verbose_name = "Tallyman - Customer Lifetime"

    def ready(self):
        from tallyman.conf import tallyman_settings

        if tallyman_settings.LIFETIME_LISTENER_ENABLED:
            from tallyman.listeners import customer_lifetime_listener

            customer_lifetime_listener().connect()
