from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from storefront.domain.services.constants import (
    DEFAULT_RATING,
    MAX_DESCRIPTION_IMAGES,
    MAX_GALLERY_IMAGES,
)

ProductStatus = Literal["online", "pending", "out-of-stock"]

# Fields persisted as serialized JSON text
LIST_FIELDS = ("images", "description_images")


def parse_url_list(value: Any) -> List[str]:
    """
    Accept a list or its JSON text form and return a clean list of URLs.
    Absent, empty or malformed values become [].
    """
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            value = json.loads(value)
        except ValueError:
            return []
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, str) and v]


def parse_count(value: Any) -> int:
    """'12 sold' -> 12; None/garbage -> 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    m = re.search(r"\d+", str(value))
    return int(m.group()) if m else 0


class WireModel(BaseModel):
    """
    Canonical snake_case model with a camelCase alias per field.
    Input accepts either spelling; `to_wire` emits both.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict:
        return dual_case_dump(self)


def dual_case_dump(model: BaseModel, **kwargs) -> dict:
    snake = model.model_dump(mode="json", **kwargs)
    camel = model.model_dump(mode="json", by_alias=True, **kwargs)
    return {**snake, **camel}


class Product(WireModel):
    id: str
    title: str
    description: Optional[str] = None
    image: str
    images: List[str] = Field(default_factory=list)
    description_images: List[str] = Field(default_factory=list)
    video_url: Optional[str] = None
    price: float
    original_price: Optional[float] = None
    discount: Optional[int] = Field(default=None, ge=0, le=100)
    category: Optional[str] = None
    category_id: Optional[str] = None
    status: ProductStatus = "online"
    sold_count: int = 0
    order_count: int = 0
    rating: float = DEFAULT_RATING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("images", mode="before")
    @classmethod
    def _gallery(cls, v):
        return parse_url_list(v)[:MAX_GALLERY_IMAGES]

    @field_validator("description_images", mode="before")
    @classmethod
    def _description_images(cls, v):
        return parse_url_list(v)[:MAX_DESCRIPTION_IMAGES]

    @field_validator("sold_count", "order_count", mode="before")
    @classmethod
    def _counts(cls, v):
        return parse_count(v)

    @field_validator("rating", mode="before")
    @classmethod
    def _rating(cls, v):
        return DEFAULT_RATING if v is None else v

    # ----- Store adapter ------------------------------------------------------

    def to_document(self) -> dict:
        """Storage form: snake_case, list fields as JSON text."""
        doc = self.model_dump()
        for f in LIST_FIELDS:
            doc[f] = json.dumps(doc[f])
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "Product":
        doc = {k: v for k, v in doc.items() if k != "_id"}
        return cls.model_validate(doc)


class ProductFields(WireModel):
    """
    Loose input shape for create and patch requests.
    Everything is optional here; required-field checks live in the router so
    they produce the API's own messages.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    images: Optional[List[str]] = None
    description_images: Optional[List[str]] = None
    video_url: Optional[str] = None
    price: Optional[float] = None
    original_price: Optional[float] = None
    discount: Optional[int] = Field(default=None, ge=0, le=100)
    category: Optional[str] = None
    category_id: Optional[str] = None
    status: Optional[ProductStatus] = None
    sold_count: Optional[int] = None
    order_count: Optional[int] = None
    rating: Optional[float] = None
    created_at: Optional[datetime] = None

    @field_validator("images", "description_images", mode="before")
    @classmethod
    def _lists(cls, v):
        return None if v is None else parse_url_list(v)

    @field_validator("sold_count", "order_count", mode="before")
    @classmethod
    def _counts(cls, v):
        return None if v is None else parse_count(v)

    @field_validator(
        "video_url", "category", "category_id", "description", "image",
        "price", "original_price", "discount", mode="before",
    )
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v
