"""
Rendering handoff: composed markup in, PDF bytes out.

DocumentRenderer is the narrow boundary the pipeline talks to. Renderer
slots are acquired per request through session() and released on every exit
path. FpdfRenderer uses fpdf2 (pure Python, no browser or system
dependencies) and lays the markup out with FPDF.write_html().
"""

import logging
import re
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from html import unescape
from typing import Optional

from fpdf import FPDF
from pydantic import BaseModel

from .config import settings
from .errors import RenderFailure

logger = logging.getLogger(__name__)


class PageOptions(BaseModel):
    format: str = "A4"
    print_background: bool = True
    margin_mm: float = 10.0

    @classmethod
    def from_settings(cls) -> "PageOptions":
        return cls(
            format=settings.PAGE_FORMAT,
            print_background=settings.PRINT_BACKGROUND,
            margin_mm=settings.PAGE_MARGIN_MM,
        )


class DocumentRenderer(ABC):
    """Black-box converter from styled markup to a paginated binary document."""

    media_type = "application/pdf"
    extension = "pdf"

    def __init__(self, max_concurrent: Optional[int] = None):
        self._slots = threading.BoundedSemaphore(max_concurrent or settings.RENDERER_MAX_CONCURRENT)

    @contextmanager
    def session(self):
        """Hold one renderer slot for the duration of a render."""
        self._slots.acquire()
        try:
            yield self
        finally:
            self._slots.release()

    @abstractmethod
    def render(self, markup: str, page_options: PageOptions) -> bytes:
        """Return the rendered document. Raises RenderFailure."""
        pass


# --- fpdf2 backend ---

_BODY = re.compile(r"<body[^>]*>(.*)</body>", re.S | re.I)
_TITLE = re.compile(r"<title[^>]*>(.*?)</title>", re.S | re.I)
_COMMENT = re.compile(r"<!--.*?-->", re.S)
_CELL = re.compile(r"<(td|th)\b([^>]*)>(.*?)</\1>", re.S | re.I)
_TAG = re.compile(r"<[^>]+>")
_DIV_OPEN = re.compile(r"<div[^>]*>", re.I)
_DIV_CLOSE = re.compile(r"</div\s*>", re.I)
_BREAK_RUN = re.compile(r"(?:\s*<br>\s*){2,}")

# Core PDF fonts only cover latin-1
_LATIN1_REPLACEMENTS = {
    "₹": "Rs.",   # rupee sign
    "€": "EUR",   # euro sign
    "•": "-",     # bullet
    "—": " - ",   # em dash
    "–": "-",     # en dash
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
}


def _safe(text: str) -> str:
    """Replace characters the built-in PDF fonts (latin-1) can't render."""
    for char, replacement in _LATIN1_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _flatten_cell(match: re.Match) -> str:
    """fpdf2 table cells take a single text run: join nested blocks with ' - '."""
    tag, attrs, inner = match.group(1), match.group(2), match.group(3)
    runs = [run.strip() for run in _TAG.split(inner) if run.strip()]
    if "text-right" in attrs and "align=" not in attrs:
        attrs += ' align="right"'
    return f"<{tag}{attrs}>{' - '.join(runs)}</{tag}>"


def to_printable_html(markup: str) -> str:
    """
    Reduce a full styled HTML document to the subset write_html() lays out:
    body only, block containers as line breaks, single-run table cells.
    """
    found = _BODY.search(markup)
    html = found.group(1) if found else markup
    html = _COMMENT.sub("", html)
    html = _CELL.sub(_flatten_cell, html)
    html = _DIV_OPEN.sub("", html)
    html = _DIV_CLOSE.sub("<br>", html)
    html = _BREAK_RUN.sub("<br>", html)
    return _safe(html.strip())


class QuotationPDF(FPDF):
    """FPDF page setup for quotation documents."""

    def __init__(self, page_options: PageOptions):
        super().__init__(orientation="P", unit="mm", format=page_options.format)
        margin = page_options.margin_mm
        self.set_margins(margin, margin, margin)
        self.set_auto_page_break(auto=True, margin=margin)

    def footer(self):
        self.set_y(-self.b_margin + 2)
        self.set_font("Helvetica", "I", 7)
        self.set_text_color(150, 150, 150)
        self.cell(0, 4, f"Page {self.page_no()}/{{nb}}", align="C")
        self.set_text_color(0, 0, 0)


class FpdfRenderer(DocumentRenderer):
    """Renders quotation markup with fpdf2's HTML support."""

    def render(self, markup: str, page_options: PageOptions) -> bytes:
        try:
            pdf = QuotationPDF(page_options)
            pdf.alias_nb_pages()
            title = _TITLE.search(markup)
            if title:
                pdf.set_title(_safe(unescape(title.group(1).strip())))
            pdf.add_page()
            pdf.set_font("Helvetica", "", 10)
            pdf.write_html(to_printable_html(markup), font_family="helvetica",
                           table_line_separators=True)
            # bytearray -> bytes for Response compatibility
            return bytes(pdf.output())
        except Exception as e:
            logger.exception("fpdf2 could not render quotation markup")
            raise RenderFailure(f"{type(e).__name__}: {e}") from e


_default_renderer: Optional[DocumentRenderer] = None
_default_lock = threading.Lock()


def get_renderer() -> DocumentRenderer:
    """Shared renderer instance (FastAPI dependency)."""
    global _default_renderer
    with _default_lock:
        if _default_renderer is None:
            _default_renderer = FpdfRenderer()
        return _default_renderer
