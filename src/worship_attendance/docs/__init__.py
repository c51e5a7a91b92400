"""Google Docs reading and write-access verification.

Usage:
    from worship_attendance.docs import DocsClient, verify_document

    client = DocsClient(auth)
    doc = client.get_document(document_id)
    print(doc.body_text)

    result = verify_document(client, document_id)
"""

from __future__ import annotations

from worship_attendance.docs.client import DocsClient, Document, extract_text
from worship_attendance.docs.verify import VerificationResult, verify_document

__all__ = ["DocsClient", "Document", "extract_text", "VerificationResult", "verify_document"]
