"""Project, rename and rank fetched articles for the period summary."""

import logging
import re
from typing import Any

from ingest_rankings.models import RawArticle

logger = logging.getLogger(__name__)

TOP_N = 30

ARTICLE_FIELDS = (
    "id",
    "title",
    "slug",
    "emoji",
    "article_type",
    "comments_count",
    "liked_count",
    "published_at",
    "user",
)
USER_FIELDS = ("id", "username", "name", "avatar_small_url")

_SNAKE_RE = re.compile(r"_([a-zA-Z0-9])")


def snake_to_camel(value: str) -> str:
    """Convert ``snake_case`` to ``camelCase``."""
    return _SNAKE_RE.sub(lambda match: match.group(1).upper(), value)


def convert_keys_to_camel_case(obj: Any) -> Any:
    """Recursively rename dict keys to camelCase, walking lists element-wise."""
    if isinstance(obj, list):
        return [convert_keys_to_camel_case(item) for item in obj]
    if isinstance(obj, dict):
        return {snake_to_camel(key): convert_keys_to_camel_case(value) for key, value in obj.items()}
    return obj


def project_article(article: RawArticle) -> dict:
    """Keep only the fields a ranked article carries."""
    projected = {key: article[key] for key in ARTICLE_FIELDS if key in article}
    if not projected.get("slug") and article.get("id") is not None:
        projected["slug"] = str(article["id"])
    user = projected.get("user")
    if isinstance(user, dict):
        projected["user"] = {key: user[key] for key in USER_FIELDS if key in user}
    return projected


def liked_count(article: RawArticle) -> int:
    return article.get("liked_count") or 0


def rank_articles(articles: list[RawArticle], top_n: int = TOP_N) -> list[dict]:
    """Return the ``top_n`` most liked articles in summary shape.

    Ties keep their original order.
    """
    liked = [article for article in articles if liked_count(article) > 0]
    if len(liked) != len(articles):
        logger.warning("Dropped %d articles without likes", len(articles) - len(liked))

    ranked = sorted(liked, key=liked_count, reverse=True)[:top_n]
    return [convert_keys_to_camel_case(project_article(article)) for article in ranked]
