"""Pydantic models for Kundli API request/response validation."""

from datetime import datetime
from typing import Optional

import pytz
from pydantic import BaseModel, Field, field_validator
from pydantic import ConfigDict


def _check_timezone(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    try:
        pytz.timezone(v)
        return v
    except pytz.exceptions.UnknownTimeZoneError:
        raise ValueError(f"Unknown timezone: {v}")


# Request Models
class BirthDataRequest(BaseModel):
    """Birth date, place and timezone of a natal chart."""

    birth_date: datetime = Field(
        ...,
        description="Birth date and time in ISO 8601 format",
        examples=["1990-01-15T10:30:00"]
    )
    latitude: float = Field(
        ...,
        ge=-90,
        le=90,
        description="Latitude in decimal degrees (-90 to 90)"
    )
    longitude: float = Field(
        ...,
        ge=-180,
        le=180,
        description="Longitude in decimal degrees (-180 to 180)"
    )
    timezone: Optional[str] = Field(
        None,
        description="IANA timezone name (e.g., 'Asia/Kolkata'). If not provided, the server default is used."
    )

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Validate timezone string."""
        return _check_timezone(v)

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{
                "birth_date": "1990-01-15T10:30:00",
                "latitude": 28.6139,
                "longitude": 77.2090,
                "timezone": "Asia/Kolkata"
            }]
        }
    )


class KundliRequest(BirthDataRequest):
    """Birth data plus the instant the running Dasha is evaluated at."""
    reference_date: Optional[datetime] = Field(
        None,
        description="Instant at which the running Dasha is evaluated (defaults to now)"
    )


class KundliRequestWithId(KundliRequest):
    """Kundli request with optional ID for batch operations."""
    id: Optional[str] = Field(
        None,
        description="Optional identifier for this chart in batch operations"
    )


class KundliBatchRequest(BaseModel):
    """Request model for batch kundli calculations."""
    charts: list[KundliRequestWithId] = Field(
        ...,
        description="List of birth charts to calculate"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{
                "charts": [
                    {
                        "id": "chart1",
                        "birth_date": "1990-01-15T10:30:00",
                        "latitude": 28.6139,
                        "longitude": 77.2090,
                        "timezone": "Asia/Kolkata"
                    },
                    {
                        "id": "chart2",
                        "birth_date": "1985-03-20T09:15:00",
                        "latitude": 19.0760,
                        "longitude": 72.8777,
                        "timezone": "Asia/Kolkata"
                    }
                ]
            }]
        }
    )


class VargaRequest(BirthDataRequest):
    """Request model for a single divisional chart."""
    division: int = Field(
        default=9,
        ge=1,
        description="Division number N of the D-N chart (16 standard charts; others use the cyclic rule)"
    )


class TransitRequest(BaseModel):
    """Request model for transit calculation."""
    natal_chart: BirthDataRequest = Field(
        ...,
        description="Natal chart data"
    )
    transit_date: Optional[datetime] = Field(
        None,
        description="Date and time for transit calculation (defaults to now)"
    )
    transit_timezone: Optional[str] = Field(
        None,
        description="Timezone for transit date (defaults to natal chart timezone)"
    )

    @field_validator('transit_timezone')
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Validate timezone string."""
        return _check_timezone(v)

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{
                "natal_chart": {
                    "birth_date": "1990-01-15T10:30:00",
                    "latitude": 28.6139,
                    "longitude": 77.2090,
                    "timezone": "Asia/Kolkata"
                },
                "transit_date": "2025-12-25T12:00:00",
                "transit_timezone": "Asia/Kolkata"
            }]
        }
    )


# Response Models
class MetadataResponse(BaseModel):
    """Metadata for a kundli."""
    birth_date_utc: str
    timezone: str
    latitude: float
    longitude: float
    ascendant_longitude: float
    sidereal_mode: int
    node_type: str


class PlacementModel(BaseModel):
    """Planet placement inside a chart."""
    planet: str
    sign: str
    sign_english: str
    house: int
    degree: int
    retrograde: bool
    dignity: Optional[str] = None


class HouseModel(BaseModel):
    """Whole-sign house and its occupants."""
    number: int
    sign: str
    lord: str
    planets: list[str]


class ChartResponse(BaseModel):
    """Natal or divisional chart."""
    name: str
    chart_type: str
    lagna: str
    lagna_english: str
    planets: list[PlacementModel]
    houses: list[HouseModel]


class DashaPeriodModel(BaseModel):
    """One Dasha period."""
    level: str
    planet: str
    start: datetime
    end: datetime
    start_label: str
    end_label: str
    years: float
    duration: str


class DashaResponse(BaseModel):
    """Running periods plus the Mahadasha timeline."""
    flow: str
    current: list[DashaPeriodModel]
    timeline: list[DashaPeriodModel]


class YogaModel(BaseModel):
    """Detected yoga or dosha."""
    name: str
    sanskrit: str
    category: str
    category_label: str
    is_benefic: bool
    strength: str
    planets: list[str]
    houses: list[int]
    description: str
    effect: str
    detail: str


class YogasResponse(BaseModel):
    """Yogas found in a natal chart."""
    yogas: list[YogaModel]
    count: int


class VargaDefinitionResponse(BaseModel):
    """Divisional chart definition."""
    division: int
    id: str
    name: str
    sanskrit: str
    purpose: str
    description: str
    rule_family: str


class VargaResponse(BaseModel):
    """One divisional chart."""
    definition: Optional[VargaDefinitionResponse] = None
    chart: ChartResponse


class KundliResponse(BaseModel):
    """Complete kundli response."""
    metadata: MetadataResponse
    chart: ChartResponse
    dasha: DashaResponse
    yogas: list[YogaModel]
    vargas: list[ChartResponse]


class TransitEntryModel(BaseModel):
    """Transiting planet mapped on the natal houses."""
    planet: str
    sign: str
    degree: int
    retrograde: bool
    natal_house: int
    moon_house: Optional[int] = None
    quality: str
    brief: str


class TransitResponse(BaseModel):
    """Transit calculation response."""
    date: str
    transit_date_utc: str
    natal_lagna: str
    natal_moon_sign: Optional[str] = None
    entries: list[TransitEntryModel]
    summary: dict[str, int]


class ErrorDetail(BaseModel):
    """Error detail for batch operations."""
    type: str
    message: str
    detail: Optional[dict] = None


class BatchResultItem(BaseModel):
    """Single result in a batch operation."""
    id: Optional[str]
    success: bool
    data: Optional[KundliResponse] = None
    error: Optional[ErrorDetail] = None


class BatchSummary(BaseModel):
    """Summary statistics for batch operation."""
    total: int
    successful: int
    failed: int


class BatchResponse(BaseModel):
    """Response for batch operations."""
    results: list[BatchResultItem]
    summary: BatchSummary


class ConfigVargasResponse(BaseModel):
    """Configuration response for divisional charts."""
    vargas: list[VargaDefinitionResponse]


class YogaCategoryResponse(BaseModel):
    """Yoga category and display label."""
    id: str
    label: str


class ConfigYogaCategoriesResponse(BaseModel):
    """Configuration response for yoga categories."""
    categories: list[YogaCategoryResponse]
