"""
Rendering handoff tests — fpdf2 backend, markup reduction, slot handling.
"""

import re

import pytest

from quotegen.document import compose
from quotegen.errors import RenderFailure
from quotegen.renderer import FpdfRenderer, PageOptions, to_printable_html

from conftest import CrashingRenderer, sample_record


# ============================================================
# fpdf2 rendering
# ============================================================

def test_renders_valid_pdf_bytes():
    pdf_bytes = FpdfRenderer().render(compose(sample_record(), locale="en_IN"), PageOptions())
    assert isinstance(pdf_bytes, bytes)
    assert pdf_bytes[:5] == b"%PDF-"
    assert len(pdf_bytes) > 1000


def test_long_item_list_paginates():
    items = [{"name": f"Part {n}", "description": "Spare", "quantity": n, "rate": 12.5} for n in range(1, 81)]
    pdf_bytes = FpdfRenderer().render(compose(sample_record(items=items)), PageOptions())
    pages = re.findall(r"/Type /Page\b", pdf_bytes.decode("latin-1"))
    assert len(pages) > 1


@pytest.mark.parametrize("locale", ["en_IN", "en_US", "en_GB", "de_DE", "sv_SE"])
def test_every_locale_renders(locale):
    pdf_bytes = FpdfRenderer().render(compose(sample_record(), locale=locale), PageOptions())
    assert pdf_bytes[:5] == b"%PDF-"


def test_page_options_from_settings():
    options = PageOptions.from_settings()
    assert options.format == "A4"
    assert options.margin_mm == 10.0
    assert options.print_background is True


def test_bad_page_format_becomes_render_failure():
    with pytest.raises(RenderFailure):
        FpdfRenderer().render(compose(sample_record()), PageOptions(format="not-a-size"))


# ============================================================
# Markup reduction
# ============================================================

def test_printable_html_drops_head_and_divs():
    printable = to_printable_html(compose(sample_record()))
    assert "<style>" not in printable
    assert "<title>" not in printable
    assert "<div" not in printable and "</div>" not in printable
    assert "<br><br>" not in printable


def test_printable_html_flattens_table_cells():
    printable = to_printable_html(compose(sample_record()))
    assert "<td>Widget - Brushed steel</td>" in printable
    assert "<td>Service</td>" in printable
    assert '<td class="text-right" align="right">' in printable


def test_printable_html_keeps_table_head_intact():
    printable = to_printable_html(compose(sample_record()))
    assert '<thead><tr><th width="5%">No.</th><th width="40%">Item</th>' in printable
    assert "<tbody><tr><td>1</td>" in printable


def test_printable_html_is_latin1():
    printable = to_printable_html(compose(sample_record(), locale="en_IN"))
    assert "Rs.270.00" in printable
    printable.encode("latin-1")


# ============================================================
# Renderer slots
# ============================================================

def test_session_releases_slot_after_failure():
    renderer = CrashingRenderer()
    with pytest.raises(RenderFailure):
        with renderer.session():
            renderer.render("<p>x</p>", PageOptions())
    assert renderer._slots.acquire(blocking=False)
    renderer._slots.release()


def test_session_holds_slot_while_rendering():
    renderer = CrashingRenderer()
    with renderer.session():
        assert not renderer._slots.acquire(blocking=False)
    assert renderer._slots.acquire(blocking=False)
    renderer._slots.release()
