"""Contact us service - typed access to the contact us settings."""

from typing import Any

from tallyman.conf import tallyman_settings
from tallyman.contrib.contact_us.conf import (
    CONSENT_CONTACT_REASON,
    ENABLE_CONTACT_REQUEST,
    SCHEMA,
    config_key,
)
from tallyman.exceptions import TallymanError


class ContactUsService:
    """
    Service for contact us settings.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def is_contact_request_enabled(cls) -> bool:
        """Whether the contact request form is enabled."""
        return cls.get(ENABLE_CONTACT_REQUEST)

    @classmethod
    def consent_contact_reason(cls) -> int | None:
        """Contact reason id used for consent requests (None when unset)."""
        return cls.get(CONSENT_CONTACT_REASON)

    @classmethod
    def settings(cls) -> dict[str, Any]:
        """All contact us settings keyed by full config key."""
        return {config_key(key): cls.get(key) for key in SCHEMA}

    @classmethod
    def get(cls, key: str) -> Any:
        """
        Read and validate one setting.

        Args:
            key: Short key (e.g. "enable_contact_request")

        Raises:
            TallymanError: If key is unknown or the configured value has the wrong type
        """
        if key not in SCHEMA:
            raise TallymanError(
                "INVALID_SETTING",
                message=f"Unknown contact us setting: {key}",
                key=key,
            )

        attr, expected, nullable = SCHEMA[key]
        value = getattr(tallyman_settings, attr)
        if value is None and nullable:
            return None
        # bool is an int subclass; an integer setting must not accept True/False
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise TallymanError(
                "INVALID_SETTING",
                message=f"{config_key(key)} must be {expected.__name__}, got {value!r}",
                key=config_key(key),
            )
        return value
