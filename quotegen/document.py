"""
Document Composer.

Builds the quotation as a small tree of section nodes and serializes it to
one self-contained HTML document (inline stylesheet, web font import only).
The markup is handed to a renderer; nothing here rasterizes.

Sections, top to bottom:
1. Header (issuer + quotation number/dates)
2. Client information
3. Line item table
4. Summary (subtotal, GST, discount, total)
5. Terms & conditions
6. Service and warranty
7. Signature lines
"""

from abc import ABC, abstractmethod
from html import escape
from typing import List, Optional

from .calculator import DerivedFinancials, compute
from .config import settings
from .errors import MissingFieldError
from .formatting import format_currency, format_date, format_number
from .schemas import QuotationRecord


TERMS_FOOTNOTES = (
    "This is a quotation on the goods/services named, subject to the conditions noted below.",
    "The prices quoted are valid until the date mentioned above.",
)

STYLESHEET = """
@import url('{font_url}');

body {{ font-family: 'Inter', sans-serif; margin: 0; padding: 0; color: #333; font-size: 12px; }}
.container {{ max-width: 800px; margin: 0 auto; padding: 20px; }}
.header {{ display: flex; justify-content: space-between; margin-bottom: 40px;
  padding-bottom: 20px; border-bottom: 1px solid #eaeaea; }}
.company-info h1 {{ color: #4f46e5; margin: 0 0 5px 0; font-size: 24px; }}
.company-info p {{ margin: 2px 0; color: #666; }}
.quotation-info {{ text-align: right; }}
.quotation-info h2 {{ color: #4f46e5; margin: 0 0 10px 0; font-size: 18px; }}
.quotation-info p, .client-info p {{ margin: 2px 0; }}
.client-info {{ margin-bottom: 30px; }}
.client-info h3, .terms h3 {{ color: #4f46e5; margin: 0 0 10px 0; font-size: 16px; }}
table {{ width: 100%; border-collapse: collapse; margin-bottom: 30px; page-break-inside: auto; }}
tr {{ page-break-inside: avoid; }}
th {{ background-color: #f9fafb; text-align: left; padding: 10px; font-weight: 600;
  border-bottom: 2px solid #eaeaea; }}
td {{ padding: 10px; border-bottom: 1px solid #eaeaea; vertical-align: top; }}
.item-name {{ font-weight: 500; }}
.item-description {{ color: #666; font-size: 11px; }}
.text-right {{ text-align: right; }}
.summary {{ margin-left: auto; width: 300px; page-break-inside: avoid; }}
.summary-row {{ display: flex; justify-content: space-between; padding: 5px 0; }}
.summary-row.total {{ font-weight: 700; font-size: 14px; border-top: 2px solid #eaeaea;
  padding-top: 10px; margin-top: 5px; }}
.terms {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #eaeaea; page-break-inside: avoid; }}
.signature {{ margin-top: 60px; display: flex; justify-content: space-between; page-break-inside: avoid; }}
.signature-box {{ width: 40%; }}
.signature-line {{ border-top: 1px solid #333; margin-top: 70px; padding-top: 5px; }}
"""


def _text(value) -> str:
    return escape(str(value)) if value is not None else ""


def _present(value) -> bool:
    """Optional text fields count as absent when None or blank."""
    return value is not None and str(value).strip() != ""


def _labelled(label: str, value) -> str:
    return f"<p><strong>{escape(label)}:</strong> {_text(value)}</p>"


class Section(ABC):
    """One block of the document. Serializes independently of the others."""

    @abstractmethod
    def to_html(self) -> str:
        pass


class HeaderSection(Section):
    def __init__(self, company_name, company_address, company_email, company_phone,
                 company_gstin, quotation_number, quotation_date, valid_until):
        self.company_name = company_name
        self.company_address = company_address
        self.company_email = company_email
        self.company_phone = company_phone
        self.company_gstin = company_gstin
        self.quotation_number = quotation_number
        self.quotation_date = quotation_date
        self.valid_until = valid_until

    def to_html(self) -> str:
        issuer = [
            f"<h1>{_text(self.company_name)}</h1>",
            f"<p>{_text(self.company_address)}</p>",
            f"<p>Email: {_text(self.company_email)}</p>",
            f"<p>Phone: {_text(self.company_phone)}</p>",
        ]
        if _present(self.company_gstin):
            issuer.append(f"<p>GSTIN: {_text(self.company_gstin)}</p>")

        quotation = [
            "<h2>QUOTATION</h2>",
            _labelled("Number", self.quotation_number),
            _labelled("Date", self.quotation_date),
            _labelled("Valid Until", self.valid_until),
        ]
        return (
            '<div class="header">'
            f'<div class="company-info">{"".join(issuer)}</div>'
            f'<div class="quotation-info">{"".join(quotation)}</div>'
            "</div>"
        )


class ClientSection(Section):
    def __init__(self, name, email, company=None, phone=None, gstin=None):
        self.name = name
        self.email = email
        self.company = company
        self.phone = phone
        self.gstin = gstin

    def to_html(self) -> str:
        lines = ["<h3>CLIENT INFORMATION</h3>", _labelled("Name", self.name)]
        if _present(self.company):
            lines.append(_labelled("Company", self.company))
        lines.append(_labelled("Email", self.email))
        if _present(self.phone):
            lines.append(_labelled("Phone", self.phone))
        if _present(self.gstin):
            lines.append(_labelled("GSTIN", self.gstin))
        return f'<div class="client-info">{"".join(lines)}</div>'


class ItemRow(Section):
    """One table row: number, name (+description), quantity, rate, amount."""

    def __init__(self, number: int, name, description, quantity: str, rate: str, amount: str):
        self.number = number
        self.name = name
        self.description = description
        self.quantity = quantity
        self.rate = rate
        self.amount = amount

    def to_html(self) -> str:
        item = f'<div class="item-name">{_text(self.name)}</div>'
        if _present(self.description):
            item += f'<div class="item-description">{_text(self.description)}</div>'
        return (
            "<tr>"
            f"<td>{self.number}</td>"
            f"<td>{item}</td>"
            f"<td>{_text(self.quantity)}</td>"
            f"<td>{_text(self.rate)}</td>"
            f'<td class="text-right">{_text(self.amount)}</td>'
            "</tr>"
        )


class ItemsTable(Section):
    COLUMNS = [("No.", 5), ("Item", 40), ("Quantity", 15), ("Rate", 20), ("Amount", 20)]

    def __init__(self, rows: List[ItemRow]):
        self.rows = rows

    def to_html(self) -> str:
        head = "".join(f'<th width="{width}%">{label}</th>' for label, width in self.COLUMNS)
        body = "".join(row.to_html() for row in self.rows)
        return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


class SummarySection(Section):
    def __init__(self, subtotal: str, tax_label: str, tax_amount: str,
                 discount_label: str, discount_amount: str, total: str):
        self.subtotal = subtotal
        self.tax_label = tax_label
        self.tax_amount = tax_amount
        self.discount_label = discount_label
        self.discount_amount = discount_amount
        self.total = total

    @staticmethod
    def _row(label: str, value: str, css: str = "summary-row") -> str:
        return f'<div class="{css}"><span>{_text(label)}</span> <span>{_text(value)}</span></div>'

    def to_html(self) -> str:
        rows = [
            self._row("Subtotal:", self.subtotal),
            self._row(self.tax_label, self.tax_amount),
            self._row(self.discount_label, self.discount_amount),
            self._row("Total:", self.total, "summary-row total"),
        ]
        return f'<div class="summary">{"".join(rows)}</div>'


class TermsSection(Section):
    def __init__(self, terms: str):
        self.terms = terms

    def to_html(self) -> str:
        notes = "".join(f"<p>{escape(note)}</p>" for note in TERMS_FOOTNOTES)
        return (
            '<div class="terms"><h3>TERMS &amp; CONDITIONS</h3>'
            f"<p>{_text(self.terms)}</p>{notes}</div>"
        )


class WarrantySection(Section):
    def __init__(self, description, duration, conditions):
        self.description = description
        self.duration = duration
        self.conditions = conditions

    def to_html(self) -> str:
        return (
            '<div class="terms"><h3>SERVICE AND WARRANTY</h3>'
            f'{_labelled("Description", self.description)}'
            f'{_labelled("Duration", self.duration)}'
            f'{_labelled("Conditions", self.conditions)}'
            "</div>"
        )


class SignatureSection(Section):
    LABELS = ("Authorized Signature", "Client Acceptance (sign above)")

    def to_html(self) -> str:
        boxes = "".join(
            f'<div class="signature-box"><div class="signature-line">{escape(label)}</div></div>'
            for label in self.LABELS
        )
        return f'<div class="signature">{boxes}</div>'


class QuotationDocument:
    """Root node: document shell plus the ordered sections."""

    def __init__(self, title: str, sections: List[Section], font_url: Optional[str] = None):
        self.title = title
        self.sections = sections
        self.font_url = font_url or settings.FONT_URL

    def to_html(self) -> str:
        body = "\n".join(section.to_html() for section in self.sections)
        return (
            "<!DOCTYPE html>\n"
            '<html lang="en">\n'
            "<head>\n"
            '<meta charset="UTF-8">\n'
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
            f"<title>{_text(self.title)}</title>\n"
            f"<style>{STYLESHEET.format(font_url=self.font_url)}</style>\n"
            "</head>\n"
            "<body>\n"
            f'<div class="container">\n{body}\n</div>\n'
            "</body>\n"
            "</html>\n"
        )


def build_document(record, derived: Optional[DerivedFinancials] = None,
                   locale: Optional[str] = None) -> QuotationDocument:
    """
    Map a QuotationRecord (plus its derived financials) onto section nodes.

    Raises MissingFieldError when the service/warranty block is absent and
    ValueError when `derived` was computed from a different item list.
    """
    if isinstance(record, dict):
        record = QuotationRecord.model_validate(record)
    if record.service_warranty is None:
        raise MissingFieldError("serviceWarranty")
    if derived is None:
        derived = compute(record)
    if len(derived.line_amounts) != len(record.items):
        raise ValueError(
            f"Derived financials cover {len(derived.line_amounts)} line items, "
            f"record has {len(record.items)}"
        )

    def money(value) -> str:
        return format_currency(value, locale)

    rows = [
        ItemRow(
            number=index,
            name=item.name,
            description=item.description,
            quantity=format_number(item.quantity),
            rate=money(item.rate),
            amount=money(amount),
        )
        for index, (item, amount) in enumerate(zip(record.items, derived.line_amounts), start=1)
    ]

    warranty = record.service_warranty
    terms = record.terms if _present(record.terms) else settings.DEFAULT_TERMS

    sections = [
        HeaderSection(
            company_name=record.company_name,
            company_address=record.company_address,
            company_email=record.company_email,
            company_phone=record.company_phone,
            company_gstin=record.company_gstin,
            quotation_number=record.quotation_number,
            quotation_date=format_date(record.quotation_date, locale),
            valid_until=format_date(record.valid_until, locale),
        ),
        ClientSection(
            name=record.client_name,
            email=record.client_email,
            company=record.client_company,
            phone=record.client_phone,
            gstin=record.client_gstin,
        ),
        ItemsTable(rows),
        SummarySection(
            subtotal=money(derived.subtotal),
            tax_label=f"GST ({format_number(record.gst_rate)}%):",
            tax_amount=money(derived.tax_amount),
            discount_label=f"Discount ({format_number(record.discount_percentage)}%)",
            discount_amount=money(derived.discount_amount),
            total=money(derived.total),
        ),
        TermsSection(terms),
        WarrantySection(warranty.description, warranty.duration, warranty.conditions),
        SignatureSection(),
    ]
    return QuotationDocument(f"Quotation - {record.quotation_number}", sections)


def compose(record, derived: Optional[DerivedFinancials] = None,
            locale: Optional[str] = None) -> str:
    """Compose the full quotation markup. Same record in, same markup out."""
    return build_document(record, derived, locale).to_html()
