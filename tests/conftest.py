"""
Shared test fixtures — sample quotation records, test client, renderer fakes.
"""

import pytest
from fastapi.testclient import TestClient

from quotegen.errors import RenderFailure
from quotegen.main import app
from quotegen.renderer import DocumentRenderer, get_renderer
from quotegen.schemas import QuotationRecord


def sample_payload(**overrides):
    """The JSON body the quotation form posts."""
    payload = {
        "quotationNumber": "QT-2025-1042",
        "quotationDate": "2025-03-14",
        "validUntil": "2025-04-13",
        "clientName": "Asha Verma",
        "clientCompany": "Verma Interiors",
        "clientEmail": "asha@vermainteriors.in",
        "clientPhone": "",
        "clientGstin": "",
        "companyName": "Brightline Fixtures",
        "companyAddress": "12 MG Road, Bengaluru",
        "companyEmail": "sales@brightline.example",
        "companyPhone": "+91 80 4000 1234",
        "companyGstin": "29ABCDE1234F1Z5",
        "companyLogo": "",
        "items": [
            {"id": 1, "name": "Widget", "description": "Brushed steel", "quantity": 2, "rate": 100},
            {"id": 2, "name": "Service", "description": "", "quantity": 1, "rate": 50},
        ],
        "gstRate": 18,
        "discountPercentage": 10,
        "terms": "",
        "serviceWarranty": {
            "description": "On-site support",
            "duration": "12 months",
            "conditions": "Standard terms and conditions apply",
        },
    }
    payload.update(overrides)
    return payload


def sample_record(**overrides) -> QuotationRecord:
    return QuotationRecord.model_validate(sample_payload(**overrides))


class RecordingRenderer(DocumentRenderer):
    """Returns fixed bytes and remembers what it was asked to render."""

    def __init__(self, content=b"%PDF-1.4 fake"):
        super().__init__(max_concurrent=1)
        self.content = content
        self.calls = []

    def render(self, markup, page_options):
        self.calls.append((markup, page_options))
        return self.content


class CrashingRenderer(DocumentRenderer):
    """Simulates a renderer process dying mid-render."""

    def __init__(self):
        super().__init__(max_concurrent=1)

    def render(self, markup, page_options):
        raise RenderFailure("renderer crashed")


@pytest.fixture
def payload():
    return sample_payload()


@pytest.fixture
def record():
    return sample_record()


@pytest.fixture
def recording_renderer():
    return RecordingRenderer()


@pytest.fixture
def client():
    """FastAPI test client. Dependency overrides are cleared afterwards."""
    yield TestClient(app)
    app.dependency_overrides.pop(get_renderer, None)
