"""Write-access check for a Google Doc.

A timestamped marker line is appended to the document and then removed again
with a global replace, leaving the visible content as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from worship_attendance.docs.client import DocsClient
from worship_attendance.google.exceptions import RemoteAPIError

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of a write round trip."""

    document_id: str
    marker: str
    inserted: bool = False
    removed: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Write access is confirmed once the insert succeeds."""
        return self.inserted

    @property
    def marker_left(self) -> bool:
        return self.inserted and not self.removed


def make_marker(now: datetime | None = None) -> str:
    now = now or datetime.now().astimezone()
    return f"[Write test {now.isoformat(timespec='seconds')}]"


def verify_document(
    client: DocsClient, document_id: str, now: datetime | None = None
) -> VerificationResult:
    """Insert a marker at the end of the body, then remove it.

    An insert failure leaves ``inserted`` False. A removal failure leaves
    ``removed`` False with the marker still in the document.
    """
    marker = make_marker(now)
    text = f"\n{marker}\n"
    result = VerificationResult(document_id=document_id, marker=marker)

    try:
        client.append_text(document_id, text)
    except RemoteAPIError as e:
        logger.error(f"Write failed for {document_id}: {e}")
        result.error = str(e)
        return result
    result.inserted = True

    try:
        client.replace_text(document_id, text, "")
    except RemoteAPIError as e:
        logger.warning(f"Could not remove marker from {document_id}: {e}")
        result.error = str(e)
        return result
    result.removed = True

    return result
