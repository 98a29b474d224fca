"""Data models for venues, deals and collections."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class DiversifyKey:
    """Keys the diversifier can spread apart."""

    ITEM_NAME = "item_name"
    VENUE_ID = "venue_id"

    ALL = (ITEM_NAME, VENUE_ID)


class Venue(BaseModel):
    """A physical establishment that offers deals."""

    id: int = Field(description="Venue identifier")
    name: str = Field(description="Display name")
    latitude: Optional[float] = Field(default=None, description="Latitude in decimal degrees")
    longitude: Optional[float] = Field(default=None, description="Longitude in decimal degrees")
    display_fields: dict[str, Any] = Field(
        default_factory=dict, description="Address, cuisine, image etc. (opaque)"
    )

    class Config:
        """Pydantic config."""

        frozen = True


class Deal(BaseModel):
    """A time-boxed drink discount at one venue."""

    id: int = Field(description="Deal identifier")
    venue_id: int = Field(description="Owning venue")
    category: str = Field(default="", description="Alcohol category, e.g. Beer")
    subcategory: str = Field(default="", description="Free-form subcategory")
    item_name: str = Field(description="Drink name, e.g. Lager")
    regular_price: float = Field(default=0.0, ge=0, description="Regular price")
    deal_price: float = Field(default=0.0, ge=0, description="Happy hour price")

    # Schedule, as authored upstream
    valid_days: str = Field(default="", description="Eligible days, e.g. 'mon-fri'")
    start_time: str = Field(default="", description="Window start, 'HH:MM' or 'HHMM'")
    end_time: str = Field(default="", description="Window end, 'HH:MM' or 'HHMM'")

    collection_tags: str = Field(default="", description="Comma-separated collection slugs")
    sort_order: Optional[int] = Field(default=None, description="Manual ordering, lower first")
    description: Optional[str] = None

    @field_validator("valid_days", "start_time", "end_time", "collection_tags", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        # Upstream sheets leave blanks as null or numbers (e.g. 1700)
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value

    @property
    def tags(self) -> list[str]:
        """Collection slugs, trimmed, empties dropped."""
        return [tag.strip() for tag in self.collection_tags.split(",") if tag.strip()]

    class Config:
        """Pydantic config."""

        frozen = True


class EnrichedDeal(BaseModel):
    """A deal joined with its venue plus the per-request derived fields."""

    deal: Deal
    venue: Optional[Venue] = None
    is_active: bool = Field(default=False, description="Day and time window both match")
    distance_km: Optional[float] = Field(
        default=None, description="Distance from viewer, None when unknown"
    )

    @property
    def id(self) -> int:
        return self.deal.id

    @property
    def venue_id(self) -> int:
        return self.deal.venue_id

    @property
    def item_name(self) -> str:
        return self.deal.item_name

    @property
    def savings_pct(self) -> Optional[float]:
        """Percentage off the regular price (one decimal)."""
        if self.deal.regular_price <= 0:
            return None
        saved = self.deal.regular_price - self.deal.deal_price
        return round(saved / self.deal.regular_price * 100, 1)

    class Config:
        """Pydantic config."""

        frozen = True


class ViewerLocation(BaseModel):
    """Viewer position in decimal degrees."""

    lat: float
    lng: float

    class Config:
        """Pydantic config."""

        frozen = True


class CollectionMeta(BaseModel):
    """Display metadata for a collection slug."""

    slug: str
    display_name: str
    description: str = ""
    priority: int = Field(default=999, description="Lower sorts first")
    enabled: bool = Field(default=True, description="Disabled slugs are ignored")
    diversify_by: str = Field(default=DiversifyKey.ITEM_NAME)

    @field_validator("diversify_by")
    @classmethod
    def _known_key(cls, value: str) -> str:
        if value not in DiversifyKey.ALL:
            raise ValueError(f"diversify_by must be one of {DiversifyKey.ALL}, got {value!r}")
        return value

    class Config:
        """Pydantic config."""

        frozen = True


class Collection(BaseModel):
    """A named, ordered bucket of deals for display."""

    name: str
    slug: str
    description: str = ""
    priority: int = 999
    diversify_by: str = DiversifyKey.ITEM_NAME
    deals: list[EnrichedDeal] = Field(default_factory=list)


class PipelineResult(BaseModel):
    """Output of one pipeline run."""

    collections: list[Collection] = Field(default_factory=list)
    radius_km: Optional[float] = Field(default=None, description="Radius tier used")
    generated_at: datetime = Field(description="Reference instant (venue local time)")
    total_deals: int = 0
    active_deals: int = 0
