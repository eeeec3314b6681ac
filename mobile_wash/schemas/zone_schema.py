"""Service zone records and their geometry descriptors."""

import json
import logging
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from mobile_wash.config import settings

logger = logging.getLogger(__name__)


class GeoPoint(BaseModel):
    """A WGS84 coordinate. Accepts ``{"lat", "lng"}`` or a ``[lat, lng]`` pair."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return {"lat": value[0], "lng": value[1]}
        return value


class CenterGeometry(BaseModel):
    """Circular zone: everything within ``radius_km`` of the center."""

    type: Literal["center"]
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    radius_km: float = Field(
        default_factory=lambda: settings.pricing.default_zone_radius_km,
        gt=0,
        validation_alias=AliasChoices("radius_km", "radius"),
    )

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


class PolygonGeometry(BaseModel):
    """Polygonal zone given as an ordered ring of (lat, lng) vertices."""

    type: Literal["polygon"]
    coordinates: list[GeoPoint] = Field(min_length=3)


ZoneGeometry = Annotated[
    Union[CenterGeometry, PolygonGeometry], Field(discriminator="type")
]


class Zone(BaseModel):
    """A geographic service area.

    ``geometry`` is parsed once when the record is loaded. A descriptor that
    does not match either shape is stored as ``None`` so the zone can never
    match a point, rather than failing the whole load.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name_ar: str = ""
    name_en: str = ""
    geometry: Optional[ZoneGeometry] = Field(
        default=None,
        validation_alias=AliasChoices("geometry", "polygon_or_center"),
    )
    notes: Optional[str] = None

    @field_validator("geometry", mode="wrap")
    @classmethod
    def _fail_closed(cls, value: Any, handler, info) -> Any:
        if value is None:
            return None
        try:
            if isinstance(value, (str, bytes)):
                value = json.loads(value)
            return handler(value)
        except ValueError as exc:
            zone_id = info.data.get("id")
            logger.warning(
                "Zone %s has malformed geometry, it will never match: %s",
                zone_id, str(exc).splitlines()[0],
            )
            return None

    @property
    def center(self) -> Optional[GeoPoint]:
        """The zone's center coordinate, when its geometry defines one."""
        if isinstance(self.geometry, CenterGeometry):
            return self.geometry.center
        return None
