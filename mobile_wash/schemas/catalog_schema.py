"""Service and add-on catalog records."""

from pydantic import BaseModel, Field


class Service(BaseModel):
    """A wash package offered by the business."""
    id: int
    slug: str
    name_ar: str = ""
    name_en: str = ""
    desc_ar: str = ""
    desc_en: str = ""
    base_price_team: float = Field(ge=0)
    base_price_solo: float = Field(ge=0)
    est_minutes: int = Field(ge=0)
    order: int = 0
    visible: bool = True


class Addon(BaseModel):
    """An optional extra that can be attached to any service."""
    id: int
    slug: str = ""
    name_ar: str = ""
    name_en: str = ""
    desc_ar: str = ""
    desc_en: str = ""
    price: float = Field(ge=0)
    est_minutes: int = Field(default=0, ge=0)
    order: int = 0
    visible: bool = True
