"""Google Docs API client implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from worship_attendance.google import GoogleOAuth
from worship_attendance.google.exceptions import DocsAPIError

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """Represents a Google Doc."""

    id: str
    title: str
    body_text: str = ""
    revision_id: str | None = None

    @property
    def word_count(self) -> int:
        """Get approximate word count."""
        return len(self.body_text.split())


def extract_text(content: Iterable[dict]) -> str:
    """Concatenate the text runs of a document body, descending into tables.

    Args:
        content: Structural elements, e.g. ``document["body"]["content"]``.
    """
    parts = []
    for element in content:
        if "paragraph" in element:
            for para_element in element["paragraph"].get("elements", []):
                if "textRun" in para_element:
                    parts.append(para_element["textRun"].get("content", ""))
        if "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    parts.append(extract_text(cell.get("content", [])))
    return "".join(parts)


class DocsClient:
    """Google Docs API client with OAuth authentication.

    Usage:
        auth = GoogleOAuth(credentials_path, client_secret_path, scopes=["docs", "drive_readonly"])
        client = DocsClient(auth)

        doc = client.get_document(document_id)
        print(doc.body_text)

        client.append_text(document_id, "\\nHello\\n")
        client.replace_text(document_id, "\\nHello\\n", "")
    """

    def __init__(self, auth: GoogleOAuth | None = None, service: Any = None) -> None:
        """Initialize Docs client.

        Args:
            auth: OAuth session used to build the service on first use.
            service: Prebuilt Docs API resource (skips ``auth``).
        """
        if auth is None and service is None:
            raise ValueError("DocsClient needs an auth session or a service")
        self._auth = auth
        self._service = service

    def _get_service(self) -> Any:
        """Get or create Docs API service."""
        if self._service is None:
            self._service = self._auth.build_service("docs", "v1")
        return self._service

    def _execute(self, request: Any, action: str) -> dict:
        try:
            return request.execute()
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            logger.warning(f"Docs API {action} failed ({status}): {e}")
            raise DocsAPIError(str(getattr(e, "reason", None) or e), status_code=status) from e
        except (OSError, httplib2.HttpLib2Error, GoogleAuthError) as e:
            logger.warning(f"Docs API {action} failed: {e}")
            raise DocsAPIError(str(e)) from e

    def _batch_update(self, document_id: str, requests: list[dict], action: str) -> dict:
        service = self._get_service()
        return self._execute(
            service.documents().batchUpdate(documentId=document_id, body={"requests": requests}),
            action,
        )

    def get_document(self, document_id: str) -> Document:
        """Get a document by ID.

        Args:
            document_id: Google Docs document ID.

        Returns:
            Document with its plain text.
        """
        service = self._get_service()
        result = self._execute(service.documents().get(documentId=document_id), "get document")
        return self._parse_document(result)

    def append_text(self, document_id: str, text: str) -> None:
        """Insert text at the end of the document body."""
        requests = [
            {
                "insertText": {
                    # Empty segment id targets the body
                    "endOfSegmentLocation": {"segmentId": ""},
                    "text": text,
                }
            }
        ]
        self._batch_update(document_id, requests, "insert")

    def replace_text(self, document_id: str, old_text: str, new_text: str) -> int:
        """Replace all occurrences of text in a document.

        Args:
            document_id: Document ID.
            old_text: Text to find (case-sensitive).
            new_text: Replacement text.

        Returns:
            Number of replacements made.
        """
        requests = [
            {
                "replaceAllText": {
                    "containsText": {"text": old_text, "matchCase": True},
                    "replaceText": new_text,
                }
            }
        ]
        result = self._batch_update(document_id, requests, "replace")

        replies = result.get("replies", [])
        if replies and "replaceAllText" in replies[0]:
            return replies[0]["replaceAllText"].get("occurrencesChanged", 0)
        return 0

    def _parse_document(self, data: dict) -> Document:
        """Parse document from API response."""
        return Document(
            id=data.get("documentId", ""),
            title=data.get("title", ""),
            body_text=extract_text(data.get("body", {}).get("content", [])),
            revision_id=data.get("revisionId"),
        )
