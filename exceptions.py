"""Tallyman exceptions."""


class TallymanError(Exception):
    """
    Structured exception for lifetime and settings operations.

    Same shape as the suite's BaseError: a stable code, a human message
    (defaulting per code) and free-form data.

    Usage:
        try:
            recalculate("CUST-001")
        except TallymanError as e:
            if e.code == "CUSTOMER_NOT_FOUND":
                handle_not_found()
    """

    _default_messages = {
        "CUSTOMER_NOT_FOUND": "Customer not found",
        "CURRENCY_RATE_NOT_FOUND": "No conversion rate for currency",
        "INVALID_SETTING": "Invalid setting value",
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self):
        return f"[{self.code}] {self.message}"

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}
