import io
import json
from typing import Callable

import docx
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from app.analysis.models import AnalysisJob

ACCOUNT_URL = "https://acct.blob.core.windows.net/"


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Contact john@example.com")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    """Generate a DOCX with one paragraph and a one-row table."""
    document = docx.Document()
    document.add_paragraph("Call 555-123-4567 today")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Name"
    table.rows[0].cells[1].text = "Jane Roe"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


def _job_payload(
    status: str = "succeeded",
    targets: list[str] | None = None,
    failed_tasks: int = 0,
) -> dict[str, object]:
    """Provider job document shaped like the live API, with one PII task."""
    documents = []
    if targets is not None:
        documents.append(
            {
                "id": "doc_0",
                "source": {"kind": "AzureBlob", "location": ACCOUNT_URL + "source-documents/x/doc.pdf"},
                "targets": [{"kind": "AzureBlob", "location": t} for t in targets],
                "warnings": [],
            }
        )
    return {
        "jobId": "job-1",
        "displayName": "PII Redaction: doc.pdf",
        "status": status,
        "createdDateTime": "2026-01-01T10:00:00Z",
        "lastUpdatedDateTime": "2026-01-01T10:00:05Z",
        "expirationDateTime": "2026-01-02T10:00:00Z",
        "errors": [],
        "tasks": {
            "completed": 1 - failed_tasks,
            "failed": failed_tasks,
            "inProgress": 0,
            "total": 1,
            "items": [
                {
                    "kind": "PiiEntityRecognitionLROResults",
                    "taskName": "Redact PII Task",
                    "lastUpdateDateTime": "2026-01-01T10:00:05Z",
                    "status": status,
                    "results": {
                        "documents": documents,
                        "errors": [],
                        "modelVersion": "2024-04-15",
                    },
                }
            ],
        },
    }


def _make_job(
    status: str = "succeeded",
    targets: list[str] | None = None,
    failed_tasks: int = 0,
) -> AnalysisJob:
    return AnalysisJob.model_validate_json(json.dumps(_job_payload(status, targets, failed_tasks)))


@pytest.fixture()
def job_payload() -> Callable[..., dict[str, object]]:
    """Factory for raw provider job documents."""
    return _job_payload


@pytest.fixture()
def make_job() -> Callable[..., AnalysisJob]:
    """Factory for parsed job snapshots."""
    return _make_job
