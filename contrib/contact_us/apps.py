"""Contact us app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ContactUsConfig(AppConfig):
    name = "tallyman.contrib.contact_us"
    label = "tallyman_contact_us"
    verbose_name = _("Fale Conosco")
