"""
Failure kinds raised by the quotation pipeline.

Every error carries the HTTP status the transport should answer with and the
message that is safe to show the caller. Diagnostic detail stays in the logs.
"""


class QuotationError(Exception):
    status_code = 500
    public_message = "Failed to generate PDF"

    def __init__(self, detail: str = "", message: str = None):
        super().__init__(detail or message or self.public_message)
        self.detail = detail
        self.message = message or self.public_message


class ValidationError(QuotationError):
    """Request rejected before generation starts (missing client name/email/items)."""

    status_code = 400
    public_message = "Missing required fields"

    def __init__(self, detail: str = "", message: str = None):
        # Client-input errors are shown verbatim.
        super().__init__(detail, message or detail or self.public_message)


class MissingFieldError(QuotationError):
    """A nested block the document needs (e.g. serviceWarranty) is absent."""

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}")
        self.field = field


class RenderFailure(QuotationError):
    """The document renderer could not produce a binary artifact."""
