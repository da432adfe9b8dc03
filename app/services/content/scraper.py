"""Content acquisition: turn posted text or a web page into plain text."""

import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from app.utils.exceptions import ContentFetchError, InvalidInputError
from app.utils.logger import get_logger

logger = get_logger(__name__)

CONTENT_SELECTOR = "main, article, section, h1, h2, h3, p, li"

_WHITESPACE_RE = re.compile(r"\s+")


def extract_visible_text(html: str) -> str:
    """
    Extract readable text from an HTML document.

    Text of content-bearing elements is joined in document order. Pages
    without any of them fall back to the whole body text.
    """
    soup = BeautifulSoup(html, "html.parser")

    parts = []
    for el in soup.select(CONTENT_SELECTOR):
        txt = el.get_text(" ", strip=True)
        if txt:
            parts.append(txt)

    extracted = " ".join(parts)
    if not extracted:
        root = soup.body or soup
        extracted = _WHITESPACE_RE.sub(" ", root.get_text(" ")).strip()
    return extracted


class ContentFetcher:
    """Fetches pages over HTTP and extracts their text."""

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self._transport = transport

    async def fetch_text(self, url: str) -> str:
        """
        Download a page and return its visible text.

        Raises:
            ContentFetchError: On transport errors, non-2xx responses or
                pages that yield no text.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
        except httpx.HTTPError as e:
            logger.error("Error fetching URL %s: %s", url, e)
            raise ContentFetchError(details={"url": url, "error": str(e)}) from e

        if not resp.is_success:
            logger.error("Failed to fetch URL %s: %s %s", url, resp.status_code, resp.reason_phrase)
            raise ContentFetchError(details={"url": url, "status": resp.status_code})

        try:
            text = extract_visible_text(resp.text)
        except Exception as e:
            logger.error("Error parsing HTML from %s: %s", url, e)
            raise ContentFetchError(details={"url": url, "error": str(e)}) from e

        if not text:
            raise ContentFetchError("The provided URL has no readable text.", details={"url": url})

        logger.info("Extracted %d chars from %s", len(text), url)
        return text

    async def acquire(self, text: Optional[str], url: Optional[str]) -> str:
        """
        Pick the document to summarize. Posted text wins over a URL.

        Raises:
            InvalidInputError: If neither text nor url is a non-blank string.
        """
        if isinstance(text, str) and text.strip():
            return text
        if isinstance(url, str) and url.strip():
            return await self.fetch_text(url.strip())
        raise InvalidInputError()
