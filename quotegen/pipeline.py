"""
Quotation pipeline: record -> financials -> markup -> rendered document.

Each call is independent. Nothing is cached between requests; financials
and markup are recomputed every time from the submitted record.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .calculator import compute
from .document import compose
from .errors import ValidationError
from .renderer import DocumentRenderer, PageOptions, get_renderer
from .schemas import QuotationRecord

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[^\x20-\x7e]|["\\/;]')


@dataclass
class GeneratedDocument:
    content: bytes
    media_type: str
    filename: str


def validate_request(record: QuotationRecord) -> None:
    """Reject a record missing client name, client email or line items."""
    missing = []
    if not record.client_name:
        missing.append("clientName")
    if not record.client_email:
        missing.append("clientEmail")
    if not record.items:
        missing.append("items")
    if missing:
        logger.warning("Rejected quotation %r: missing %s", record.quotation_number, ", ".join(missing))
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def document_filename(record: QuotationRecord, extension: str = "pdf") -> str:
    """Quotation-{number}.{ext}, with characters that break a header stripped."""
    number = _UNSAFE_FILENAME_CHARS.sub("", record.quotation_number)
    return f"Quotation-{number}.{extension}"


def preview_quotation(record: QuotationRecord) -> str:
    """Validated markup only, no rendering."""
    validate_request(record)
    return compose(record, compute(record))


def generate_quotation(
    record: QuotationRecord,
    renderer: Optional[DocumentRenderer] = None,
    page_options: Optional[PageOptions] = None,
) -> GeneratedDocument:
    """
    Full generation for one request. All-or-nothing: either a complete
    document comes back or ValidationError / MissingFieldError / RenderFailure
    is raised.
    """
    validate_request(record)
    renderer = renderer or get_renderer()
    page_options = page_options or PageOptions.from_settings()

    logger.info("Generating quotation %s (%d items)", record.quotation_number, len(record.items))
    derived = compute(record)
    markup = compose(record, derived)

    with renderer.session():
        content = renderer.render(markup, page_options)

    logger.info("Quotation %s rendered (%d bytes)", record.quotation_number, len(content))
    return GeneratedDocument(
        content=content,
        media_type=renderer.media_type,
        filename=document_filename(record, renderer.extension),
    )
