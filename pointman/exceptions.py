"""Pointman exceptions."""


class BaseError(Exception):
    """
    Structured exception carrying a machine-readable code.

    Extra keyword arguments are kept in ``data`` so callers can render
    specific messaging without parsing the message text.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}

    def __repr__(self):
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class PointmanError(BaseError):
    """
    Structured exception for loyalty operations.

    Usage:
        try:
            Ledger.redeem("ACC-001", 100, "Redeemed Free Coffee")
        except PointmanError as e:
            if e.code == "INSUFFICIENT_POINTS":
                handle_insufficient(e.data["available"])
    """

    _default_messages = {
        "ACCOUNT_NOT_FOUND": "Loyalty account not found",
        "INVALID_POINTS": "Points must be positive",
        "INVALID_RULE_CONFIGURATION": "Rule parameters are inconsistent with its type",
        "INSUFFICIENT_POINTS": "Insufficient points for redemption",
        "UNKNOWN_REWARD": "Reward not found",
        "LEDGER_WRITE_FAILURE": "Points balance could not be updated",
        "INVALID_ORDER_EVENT": "Order event is malformed",
    }
