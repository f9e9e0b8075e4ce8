"""
Tallyman Contact Us - settings for the "contact us" request form.

Two passive settings, read from TALLYMAN in settings.py:
- ENABLE_CONTACT_REQUEST (bool, default True)
- CONSENT_CONTACT_REASON (int or None, default None): contact reason used
  for consent requests

Usage:
    INSTALLED_APPS = [
        ...
        "tallyman",
        "tallyman.contrib.contact_us",
    ]

    from tallyman.contrib.contact_us import ContactUsService

    if ContactUsService.is_contact_request_enabled():
        reason_id = ContactUsService.consent_contact_reason()
"""


def __getattr__(name):
    if name == "ContactUsService":
        from tallyman.contrib.contact_us.service import ContactUsService

        return ContactUsService
    if name == "config_key":
        from tallyman.contrib.contact_us.conf import config_key

        return config_key
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ContactUsService", "config_key"]
