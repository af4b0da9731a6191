from typing import Optional

from pydantic import BaseModel, Field


def name_key(name: str) -> str:
    """Uniqueness key for category names ("Mobiles" == " mobiles ")."""
    return name.strip().casefold()


class Category(BaseModel):
    id: str
    name: str
    icon: Optional[str] = None
    image: Optional[str] = None


class CategoryIn(BaseModel):
    name: str = Field(default="", description="Unique category name")
    icon: Optional[str] = None
    image: Optional[str] = None
