"""Contact us settings schema and config keys."""

ROOT_NODE = "tallyman_contact_us"
ENABLE_CONTACT_REQUEST = "enable_contact_request"
CONSENT_CONTACT_REASON = "consent_contact_reason"

SECTION_SEPARATOR = "."

# key -> (TallymanSettings attribute, expected type, nullable)
SCHEMA = {
    ENABLE_CONTACT_REQUEST: ("ENABLE_CONTACT_REQUEST", bool, False),
    CONSENT_CONTACT_REASON: ("CONSENT_CONTACT_REASON", int, True),
}


def config_key(key: str, separator: str = SECTION_SEPARATOR) -> str:
    """Full config key, e.g. "tallyman_contact_us.enable_contact_request"."""
    return f"{ROOT_NODE}{separator}{key}"
