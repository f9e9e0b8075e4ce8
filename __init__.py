"""
Django Tallyman - Customer lifetime value.

Keeps Customer.lifetime in sync with orders and payment transactions.
Recomputation is deferred until the enclosing transaction commits and runs
once per customer per transaction.

Usage:
    from tallyman import LifetimeProcessor, TallymanError

    value = LifetimeProcessor().calculate_lifetime_value(customer)

    # Contact us settings
    from tallyman.contrib.contact_us import ContactUsService
    ContactUsService.is_contact_request_enabled()
"""


def __getattr__(name):
    if name == "LifetimeProcessor":
        from tallyman.services.lifetime import LifetimeProcessor

        return LifetimeProcessor
    if name == "CustomerLifetimeListener":
        from tallyman.listeners import CustomerLifetimeListener

        return CustomerLifetimeListener
    if name == "TallymanError":
        from tallyman.exceptions import TallymanError

        return TallymanError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["LifetimeProcessor", "CustomerLifetimeListener", "TallymanError"]
__version__ = "0.1.0"
