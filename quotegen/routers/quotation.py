"""
Quotation endpoints.

POST /api/generate-pdf — quotation record in, PDF download out.
POST /api/preview      — composed HTML, no rendering.
POST /api/calculate    — derived financials for the live form totals.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response

from ..calculator import compute
from ..pipeline import generate_quotation, preview_quotation
from ..renderer import DocumentRenderer, get_renderer
from ..schemas import QuotationRecord

router = APIRouter(tags=["quotation"])


@router.post("/generate-pdf")
def generate_pdf(
    record: QuotationRecord,
    renderer: DocumentRenderer = Depends(get_renderer),
):
    """
    Generate and download the quotation document.

    Returns: application/pdf, attachment named Quotation-{quotationNumber}.pdf
    """
    document = generate_quotation(record, renderer)
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{document.filename}"',
        },
    )


@router.post("/preview", response_class=HTMLResponse)
def preview(record: QuotationRecord):
    return HTMLResponse(content=preview_quotation(record))


@router.post("/calculate")
def calculate(record: QuotationRecord):
    """Totals for a draft. No required-field check."""
    return compute(record).model_dump(by_alias=True)
