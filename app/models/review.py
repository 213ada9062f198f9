from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Review(BaseModel):
    """A review document as stored in the ``reviews`` collection."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    product_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ProductName", "productName", "product_name"),
    )
    review_text: str = Field(
        default="",
        validation_alias=AliasChoices("ReviewText", "reviewText", "review_text"),
    )

    @field_validator("product_name", mode="before")
    @classmethod
    def _non_string_name_is_missing(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("review_text", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @classmethod
    def from_document(cls, doc_id: str | None, data: dict[str, Any]) -> "Review":
        return cls.model_validate({**data, "id": doc_id})


class RankingEntry(BaseModel):
    rank: int
    product_name: str
    count: int


class RankingResponse(BaseModel):
    entries: list[RankingEntry]
    total_reviews: int
    unlabeled: int  # reviews without a usable product name


class SearchResponse(BaseModel):
    product_name: str
    results: list[Review]
    count: int
