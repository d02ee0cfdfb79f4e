"""
Markup sources.

A markup source supplies the title and raw storage-format markup of a
document given its identifier. The parser never performs I/O itself; the
HTTP implementation here is a thin client for a wiki REST endpoint.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol
from urllib.parse import parse_qs, urlparse

import requests

from ..exceptions.source_exceptions import DocumentNotFoundError, MarkupSourceError
from ..utils.config.settings import SourceSettings

logger = logging.getLogger(__name__)

CONTENT_ENDPOINT = "/rest/api/content/{document_id}"
PAGE_PATH_PATTERN = re.compile(r"/pages/(\d+)(?:/|$)")


@dataclass(frozen=True)
class SourcePage:
    """Title and storage-format markup of one document."""
    document_id: str
    title: str
    markup: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class MarkupSource(Protocol):
    """Anything able to fetch the markup of a document."""

    def fetch(self, document_id: str) -> SourcePage:
        ...


def page_id_from_url(url: str) -> Optional[str]:
    """
    Extract a page id from a wiki page URL.

    Understands ``.../pages/<id>`` paths (with or without a trailing title
    segment) and ``pageId=<id>`` query parameters. Returns None for URLs that
    only name the page by title.
    """
    parsed = urlparse(url)
    match = PAGE_PATH_PATTERN.search(parsed.path)
    if match:
        return match.group(1)

    page_ids = parse_qs(parsed.query).get("pageId")
    if page_ids and page_ids[0].isdigit():
        return page_ids[0]
    return None


class HttpMarkupSource:
    """
    Fetches storage-format markup over the wiki REST API.

    One GET per document, authenticated with a bearer token when one is
    configured. Failures surface as MarkupSourceError; there is no retry.
    """

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the source.

        Args:
            base_url: Wiki base URL, e.g. ``https://example.atlassian.net/wiki``
            api_token: Bearer token sent in the Authorization header
            timeout: Request timeout in seconds
            session: Session to reuse (default: a new requests.Session)
        """
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        if api_token:
            self._session.headers["Authorization"] = f"Bearer {api_token}"

    @classmethod
    def from_settings(cls, settings: SourceSettings) -> "HttpMarkupSource":
        if not settings.is_configured:
            raise ValueError("source.base_url is not configured (set WIKIDOC_BASE_URL)")
        return cls(settings.base_url, api_token=settings.api_token, timeout=settings.timeout)

    def content_url(self, document_id: str) -> str:
        return self.base_url + CONTENT_ENDPOINT.format(document_id=document_id)

    def fetch(self, document_id: str) -> SourcePage:
        """
        Fetch one document.

        Raises:
            DocumentNotFoundError: If the server answers 404
            MarkupSourceError: On any other HTTP, network or payload error
        """
        url = self.content_url(document_id)
        logger.debug(f"Fetching markup for document {document_id} from {url}")

        try:
            response = self._session.get(url, params={"expand": "body.storage"}, timeout=self.timeout)
        except requests.RequestException as e:
            raise MarkupSourceError(
                f"Network error fetching document {document_id}: {e}",
                document_id=document_id,
                original_exception=e,
            ) from e

        if response.status_code == 404:
            raise DocumentNotFoundError(
                f"Document {document_id} not found",
                document_id=document_id,
                status_code=404,
            )
        if response.status_code >= 400:
            raise MarkupSourceError(
                f"Fetching document {document_id} failed with status {response.status_code}",
                document_id=document_id,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            markup = payload["body"]["storage"]["value"]
        except (ValueError, KeyError, TypeError) as e:
            raise MarkupSourceError(
                f"Unexpected response payload for document {document_id}: {e}",
                document_id=document_id,
                status_code=response.status_code,
                original_exception=e,
            ) from e

        metadata = {
            key: payload[key] for key in ("type", "status") if key in payload
        }
        version = payload.get("version") or {}
        if isinstance(version, dict) and "number" in version:
            metadata["version"] = version["number"]

        return SourcePage(
            document_id=str(payload.get("id", document_id)),
            title=payload.get("title", ""),
            markup=markup or "",
            metadata=metadata,
        )
