import logging
import time
from typing import Optional

import feedparser
import requests

from mystery_feed.api.exceptions import FetchError, ParseError
from mystery_feed.config import Settings
from mystery_feed.models.feed import SourceFeed
from mystery_feed.utils.feed_mapping import map_feedparser_result, normalize_explicit_flags
from mystery_feed.utils.raw_rss import extract_raw_fields

logger = logging.getLogger(__name__)

# feedparser flags these but still parses the document completely
BENIGN_BOZO_EXCEPTIONS = (feedparser.CharacterEncodingOverride, feedparser.NonXMLContentType)


class FeedFetcher:
    """Downloads an RSS feed and parses it into a SourceFeed."""

    DEFAULT_TIMEOUT = 10 # Default request timeout in seconds
    MAX_RETRIES = 1
    RETRY_BACKOFF = 1 # Seconds to wait before the retry

    def __init__(
        self,
        feed_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_backoff: float = RETRY_BACKOFF,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.feed_url = feed_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "FeedFetcher":
        return cls(
            feed_url=settings.SOURCE_FEED_URL,
            timeout=settings.FETCH_TIMEOUT_SECONDS,
            max_retries=settings.FETCH_MAX_RETRIES,
            retry_backoff=settings.FETCH_RETRY_BACKOFF_SECONDS,
            user_agent=settings.FETCH_USER_AGENT,
            session=session,
        )

    def close(self) -> None:
        """Releases the session's pooled connections."""
        self.session.close()

    def __enter__(self) -> "FeedFetcher":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def fetch(self, url: Optional[str] = None) -> SourceFeed:
        """
        Fetches and parses a feed.

        This is a blocking network call; async callers should run it in a worker thread.

        Args:
            url: Feed to fetch. Defaults to the configured upstream feed.

        Returns:
            The parsed SourceFeed.

        Raises:
            FetchError: The remote was unreachable or answered with a non-success status.
            ParseError: The body was not a well-formed feed document.
        """
        url = url or self.feed_url
        content = self._download(url)
        feed = self.parse(content, source=url)
        logger.info(f"Fetched {len(feed.episodes)} episodes from {url}")
        return feed

    def _download(self, url: str) -> bytes:
        """GETs the feed body, retrying connection failures, timeouts and 5xx responses."""
        attempt = 0
        last_error: Optional[FetchError] = None

        while attempt <= self.max_retries:
            if attempt > 0:
                logger.warning(f"Retrying feed request to {url} in {self.retry_backoff}s (attempt {attempt + 1}/{self.max_retries + 1})...")
                time.sleep(self.retry_backoff)
            attempt += 1

            try:
                logger.debug(f"Requesting feed {url} with timeout {self.timeout}s")
                response = self.session.get(url, timeout=self.timeout)
            except requests.exceptions.Timeout:
                logger.warning(f"Feed request timed out for {url}.")
                last_error = FetchError(f"Timed out fetching {url}")
                continue
            except requests.exceptions.RequestException as e:
                # ConnectionError, TooManyRedirects, invalid URL, ...
                logger.error(f"Feed request failed for {url}: {e}")
                last_error = FetchError(f"Request failed for {url}: {e}")
                continue

            if response.status_code >= 500:
                logger.warning(f"Server error {response.status_code} for {url}.")
                last_error = FetchError(f"Server error {response.status_code} for {url}", status_code=response.status_code)
                continue
            if not 200 <= response.status_code < 300:
                # Client errors and unexpected statuses are not retried
                raise FetchError(f"Unexpected status {response.status_code} for {url}", status_code=response.status_code)

            return response.content

        logger.error(f"Max retries exceeded for feed request to {url}.")
        raise last_error or FetchError(f"Max retries exceeded for {url}")

    def parse(self, content: bytes, source: str = "<bytes>") -> SourceFeed:
        """
        Parses raw feed bytes.

        Raises:
            ParseError: feedparser flagged the document as malformed or found no feed in it.
        """
        parsed = feedparser.parse(normalize_explicit_flags(content))

        if parsed.bozo and not isinstance(parsed.get('bozo_exception'), BENIGN_BOZO_EXCEPTIONS):
            bozo_exception = parsed.get('bozo_exception', 'Unknown parsing issue')
            logger.error(f"Feed at {source} is not well-formed: {bozo_exception}")
            raise ParseError(f"Feed at {source} is not well-formed: {bozo_exception}")
        if not parsed.get('version'):
            logger.error(f"No RSS or Atom feed recognised at {source}.")
            raise ParseError(f"No RSS or Atom feed recognised at {source}")

        return map_feedparser_result(parsed, extract_raw_fields(content))
