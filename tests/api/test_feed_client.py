import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

from mystery_feed.api.exceptions import FetchError, ParseError
from mystery_feed.api.feed_client import FeedFetcher
from mystery_feed.config import Settings

FEED_URL = "https://feeds.example.com/smartless"
SAMPLE_FEED = (Path(__file__).resolve().parents[1] / "fixtures" / "sample_feed.xml").read_bytes()


def _response(status_code=200, content=b""):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    return response


class TestFeedFetcher(unittest.TestCase):

    def setUp(self):
        self.mock_session = MagicMock()
        self.fetcher = FeedFetcher(FEED_URL, timeout=5, max_retries=1, retry_backoff=0, session=self.mock_session)

    def test_fetch_success(self):
        """A 200 response is parsed into the source feed."""
        self.mock_session.get.return_value = _response(200, SAMPLE_FEED)

        feed = self.fetcher.fetch()

        self.mock_session.get.assert_called_once_with(FEED_URL, timeout=5)
        self.assertEqual(feed.channel.title, "SmartLess")
        self.assertEqual(len(feed.episodes), 3)
        self.assertEqual(feed.episodes[0].title, '"Ted Danson LIVE in Chicago"')

    def test_fetch_uses_explicit_url(self):
        self.mock_session.get.return_value = _response(200, SAMPLE_FEED)

        self.fetcher.fetch("https://other.example.com/feed")

        self.mock_session.get.assert_called_once_with("https://other.example.com/feed", timeout=5)

    @patch('mystery_feed.api.feed_client.time.sleep')
    def test_retries_once_after_timeout(self, mock_sleep):
        self.mock_session.get.side_effect = [
            requests.exceptions.Timeout("slow"),
            _response(200, SAMPLE_FEED),
        ]

        feed = self.fetcher.fetch()

        self.assertEqual(self.mock_session.get.call_count, 2)
        mock_sleep.assert_called_once_with(0)
        self.assertEqual(len(feed.episodes), 3)

    @patch('mystery_feed.api.feed_client.time.sleep')
    def test_connection_errors_exhaust_retries(self, mock_sleep):
        self.mock_session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(FetchError) as ctx:
            self.fetcher.fetch()

        self.assertEqual(self.mock_session.get.call_count, 2)
        self.assertIn("refused", str(ctx.exception))
        self.assertIsNone(ctx.exception.status_code)

    @patch('mystery_feed.api.feed_client.time.sleep')
    def test_server_errors_are_retried_then_raised(self, mock_sleep):
        self.mock_session.get.return_value = _response(503)

        with self.assertRaises(FetchError) as ctx:
            self.fetcher.fetch()

        self.assertEqual(self.mock_session.get.call_count, 2)
        self.assertEqual(ctx.exception.status_code, 503)

    @patch('mystery_feed.api.feed_client.time.sleep')
    def test_client_errors_are_not_retried(self, mock_sleep):
        self.mock_session.get.return_value = _response(404)

        with self.assertRaises(FetchError) as ctx:
            self.fetcher.fetch()

        self.mock_session.get.assert_called_once()
        mock_sleep.assert_not_called()
        self.assertEqual(ctx.exception.status_code, 404)

    @patch('mystery_feed.api.feed_client.time.sleep')
    def test_no_retry_when_disabled(self, mock_sleep):
        fetcher = FeedFetcher(FEED_URL, max_retries=0, session=self.mock_session)
        self.mock_session.get.return_value = _response(500)

        with self.assertRaises(FetchError):
            fetcher.fetch()

        self.mock_session.get.assert_called_once()
        mock_sleep.assert_not_called()

    def test_truncated_xml_raises_parse_error(self):
        self.mock_session.get.return_value = _response(200, b"<rss><channel><title>x</title")

        with self.assertRaises(ParseError):
            self.fetcher.fetch()

    def test_html_page_raises_parse_error(self):
        self.mock_session.get.return_value = _response(200, b"<html><body><p>Maintenance</p></body></html>")

        with self.assertRaises(ParseError):
            self.fetcher.fetch()

    def test_empty_body_raises_parse_error(self):
        with self.assertRaises(ParseError):
            self.fetcher.parse(b"")

    def test_parse_keeps_channel_description_and_keywords(self):
        feed = self.fetcher.parse(SAMPLE_FEED)

        self.assertEqual(feed.channel.description, "Three friends and a mystery guest.")
        self.assertEqual(feed.channel.keywords, "comedy,interviews,celebrities")
        self.assertEqual(
            feed.episodes[0].content_snippet,
            "Ted Danson joins the guys on stage.\n\nRecorded live & loud.",
        )

    def test_close_releases_session(self):
        self.fetcher.close()
        self.mock_session.close.assert_called_once()

    def test_context_manager_closes_session(self):
        self.mock_session.get.side_effect = requests.exceptions.InvalidURL("bad")

        with self.assertRaises(FetchError):
            with FeedFetcher(FEED_URL, max_retries=0, session=self.mock_session) as fetcher:
                fetcher.fetch()

        self.mock_session.close.assert_called_once()

    def test_from_settings(self):
        settings = Settings(
            SOURCE_FEED_URL=FEED_URL,
            FETCH_TIMEOUT_SECONDS=3,
            FETCH_MAX_RETRIES=2,
            FETCH_RETRY_BACKOFF_SECONDS=0.5,
            FETCH_USER_AGENT="test-agent/1.0",
        )

        fetcher = FeedFetcher.from_settings(settings, session=requests.Session())

        self.assertEqual(fetcher.feed_url, FEED_URL)
        self.assertEqual(fetcher.timeout, 3)
        self.assertEqual(fetcher.max_retries, 2)
        self.assertEqual(fetcher.retry_backoff, 0.5)
        self.assertEqual(fetcher.session.headers["User-Agent"], "test-agent/1.0")


if __name__ == '__main__':
    unittest.main()
