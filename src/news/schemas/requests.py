"""News API request schemas"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


class NewsFilter(BaseModel):
    """
    Filter shared by queries and refreshes.
    Absent fields place no constraint; classification values are normalised to lower case.
    """
    model_config = ConfigDict(frozen=True)

    country: Optional[str] = None
    language: Optional[str] = None
    category: Optional[str] = None
    keyword: Optional[str] = None

    @field_validator("country", "language", "category", mode="before")
    @classmethod
    def normalise_code(cls, value):
        if value is None:
            return None
        value = str(value).strip().lower()
        return value or None

    @field_validator("keyword", mode="before")
    @classmethod
    def normalise_keyword(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @property
    def fingerprint(self) -> Tuple[Optional[str], Optional[str], Optional[str], Optional[str]]:
        """The (country, language, category, keyword) tuple identifying cache entries and refreshes"""
        return (self.country, self.language, self.category, self.keyword)
