"""HTTP client for the Zenn articles API."""

import logging
from typing import Optional

import requests

from common.config import SourceConfig
from common.errors import TransportFailure
from ingest_rankings.models import ArticlePage

logger = logging.getLogger(__name__)

USER_AGENT = "zenn-ranking/1.0 (ranking batch)"


class ZennClient:
    """Content source returning article pages, newest first with ``order=latest``."""

    def __init__(self, config: SourceConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    @property
    def articles_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/articles"

    def get_page(self, page: int, count: int, order: str) -> ArticlePage:
        """Fetch one page of articles.

        Raises:
            TransportFailure: On any HTTP error or an unexpected body.
        """
        try:
            response = self.session.get(
                self.articles_url,
                params={"page": str(page), "count": str(count), "order": order},
                timeout=self.config.request_timeout,
                headers={"User-Agent": USER_AGENT},
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise TransportFailure(f"Failed to fetch page {page} from {self.articles_url}: {exc}") from exc
        except ValueError as exc:
            raise TransportFailure(f"Page {page} from {self.articles_url} is not JSON") from exc

        if not isinstance(data, dict):
            raise TransportFailure(f"Page {page} body is not an object")

        articles = data.get("articles") or []
        if not isinstance(articles, list):
            raise TransportFailure(f"Page {page} articles is not a list")

        next_page = data.get("next_page")
        if next_page is not None:
            try:
                next_page = int(next_page)
            except (TypeError, ValueError) as exc:
                raise TransportFailure(f"Page {page} next_page is not a number: {next_page!r}") from exc
        return ArticlePage(articles=articles, next_page=next_page)
