from typing import Optional

from ..core.exceptions import ValidationError
from ..news.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_IMAGE_URL_LENGTH,
    MAX_KEYWORD_LENGTH,
    MAX_TITLE_LENGTH,
    MAX_URL_LENGTH,
    MIN_KEYWORD_LENGTH,
)
from ..news.providers.base import NewsItem
from ..news.schemas.requests import NewsFilter


def validate_keyword(keyword: Optional[str], required: bool = False) -> None:
    if keyword is None or not keyword.strip():
        if required:
            raise ValidationError(
                f"Search query must be at least {MIN_KEYWORD_LENGTH} characters long",
                details={"field": "keyword"}
            )
        return

    length = len(keyword.strip())
    if length < MIN_KEYWORD_LENGTH:
        raise ValidationError(
            f"Search query must be at least {MIN_KEYWORD_LENGTH} characters long",
            details={"field": "keyword"}
        )
    if length > MAX_KEYWORD_LENGTH:
        raise ValidationError(
            f"Search query must be at most {MAX_KEYWORD_LENGTH} characters long",
            details={"field": "keyword"}
        )


def validate_news_filter(news_filter: NewsFilter) -> None:
    validate_keyword(news_filter.keyword)


def article_rejection_reason(item: NewsItem) -> Optional[str]:
    """Why an article cannot be stored, or None when it is valid"""
    if not item.title or not item.title.strip():
        return "missing title"
    if not item.url or not item.url.strip():
        return "missing url"
    if len(item.title) > MAX_TITLE_LENGTH:
        return "title too long"
    if len(item.url) > MAX_URL_LENGTH:
        return "url too long"
    if item.description is not None and len(item.description) > MAX_DESCRIPTION_LENGTH:
        return "description too long"
    if item.image_url is not None and len(item.image_url) > MAX_IMAGE_URL_LENGTH:
        return "image url too long"
    return None
