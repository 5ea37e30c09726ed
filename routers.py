"""API routers for Kundli API."""

from datetime import datetime
from functools import lru_cache
from typing import Optional

import pytz
from fastapi import APIRouter, Depends

from config import settings
from dasha import DashaPeriod, DashaResult, compute_dasha, format_date, vimshottari_timeline
from ephemeris import SwissEphemeris, to_utc
from exceptions import ChartCalculationError, KundliAPIException
from kundli import KundliReport, compute_current_transits, compute_kundli, moon_longitude
from models import (
    BirthDataRequest,
    KundliRequest,
    KundliBatchRequest,
    VargaRequest,
    TransitRequest,
    KundliResponse,
    MetadataResponse,
    ChartResponse,
    PlacementModel,
    HouseModel,
    DashaPeriodModel,
    DashaResponse,
    YogaModel,
    YogasResponse,
    VargaResponse,
    VargaDefinitionResponse,
    TransitEntryModel,
    TransitResponse,
    BatchResponse,
    BatchResultItem,
    BatchSummary,
    ErrorDetail,
    ConfigVargasResponse,
    ConfigYogaCategoriesResponse,
    YogaCategoryResponse,
)
from natal import Chart, Placement, build_natal_chart
from transits import TransitResult
from varga import VARGA_DEFINITIONS, VargaDefinition, compute_varga, get_varga_definition
from yogas import YOGA_CATEGORY_LABELS, YogaCategory, YogaResult, evaluate_yogas
from zodiac import Graha, is_debilitated, is_exalted, is_own_sign

router = APIRouter()


@lru_cache()
def get_ephemeris() -> SwissEphemeris:
    """Shared ephemeris adapter, configured once from settings."""
    return SwissEphemeris()


# Helper Functions
def _now() -> datetime:
    return datetime.now(pytz.UTC)


def _dignity(p: Placement) -> Optional[str]:
    if is_exalted(p.graha, p.rashi):
        return "exalted"
    if is_own_sign(p.graha, p.rashi):
        return "own"
    if is_debilitated(p.graha, p.rashi):
        return "debilitated"
    return None


def _convert_chart(chart: Chart) -> ChartResponse:
    """Convert a Chart dataclass to its Pydantic model."""
    return ChartResponse(
        name=chart.name,
        chart_type=chart.chart_type,
        lagna=chart.lagna.value,
        lagna_english=chart.lagna.english,
        planets=[
            PlacementModel(
                planet=p.graha.value,
                sign=p.rashi.value,
                sign_english=p.rashi.english,
                house=p.house,
                degree=p.degree,
                retrograde=p.retrograde,
                dignity=_dignity(p)
            )
            for p in chart.placements()
        ],
        houses=[
            HouseModel(
                number=house.number,
                sign=house.rashi.value,
                lord=house.rashi.lord.value,
                planets=[p.graha.value for p in house.placements]
            )
            for house in (chart.houses[n] for n in range(1, 13))
        ]
    )


def _convert_period(period: DashaPeriod) -> DashaPeriodModel:
    return DashaPeriodModel(
        level=period.level.value,
        planet=period.planet.value,
        start=period.start,
        end=period.end,
        start_label=format_date(period.start),
        end_label=format_date(period.end),
        years=period.years,
        duration=period.duration
    )


def _convert_dasha(result: DashaResult, timeline: list[DashaPeriod]) -> DashaResponse:
    return DashaResponse(
        flow=result.flow,
        current=[_convert_period(p) for p in result.periods],
        timeline=[_convert_period(p) for p in timeline]
    )


def _convert_yoga(yoga: YogaResult) -> YogaModel:
    return YogaModel(
        name=yoga.name,
        sanskrit=yoga.sanskrit,
        category=yoga.category.value,
        category_label=YOGA_CATEGORY_LABELS[yoga.category],
        is_benefic=yoga.is_benefic,
        strength=yoga.strength.value,
        planets=[g.value for g in yoga.planets],
        houses=list(yoga.houses),
        description=yoga.description,
        effect=yoga.effect,
        detail=yoga.detail
    )


def _convert_varga_definition(definition: VargaDefinition) -> VargaDefinitionResponse:
    return VargaDefinitionResponse(
        division=definition.division,
        id=definition.id,
        name=definition.name,
        sanskrit=definition.sanskrit,
        purpose=definition.purpose,
        description=definition.description,
        rule_family=definition.rule.family.value
    )


def _convert_transits(result: TransitResult, chart: Chart) -> TransitResponse:
    moon = chart.placement(Graha.MOON)
    return TransitResponse(
        date=result.date,
        transit_date_utc=result.instant.isoformat(),
        natal_lagna=chart.lagna.value,
        natal_moon_sign=moon.rashi.value if moon else None,
        entries=[
            TransitEntryModel(
                planet=e.graha.value,
                sign=e.rashi.value,
                degree=e.degree,
                retrograde=e.retrograde,
                natal_house=e.natal_house,
                moon_house=e.moon_house,
                quality=e.quality.value,
                brief=e.brief
            )
            for e in result.entries
        ],
        summary={quality.value: count for quality, count in result.summary().items()}
    )


def _build_kundli(request: KundliRequest, ephemeris) -> KundliReport:
    """Run the full engine for one request."""
    return compute_kundli(
        ephemeris,
        birth_date=request.birth_date,
        latitude=request.latitude,
        longitude=request.longitude,
        timezone=request.timezone,
        reference=request.reference_date or _now()
    )


def _build_natal_chart(request: BirthDataRequest, ephemeris) -> Chart:
    snapshot = ephemeris.compute_natal(request.birth_date, request.latitude,
                                       request.longitude, request.timezone)
    return build_natal_chart(snapshot)


def _kundli_response(request: KundliRequest, report: KundliReport) -> KundliResponse:
    return KundliResponse(
        metadata=MetadataResponse(
            birth_date_utc=report.birth_utc.isoformat(),
            timezone=request.timezone or settings.DEFAULT_TIMEZONE,
            latitude=request.latitude,
            longitude=request.longitude,
            ascendant_longitude=report.snapshot.ascendant_longitude,
            sidereal_mode=settings.SIDEREAL_MODE,
            node_type=settings.NODE_TYPE
        ),
        chart=_convert_chart(report.chart),
        dasha=_convert_dasha(report.dasha, report.timeline),
        yogas=[_convert_yoga(y) for y in report.yogas],
        vargas=[_convert_chart(v) for v in report.vargas]
    )


# Configuration Endpoints
@router.get(
    "/config/vargas",
    response_model=ConfigVargasResponse,
    summary="List Divisional Charts",
    description="Get the sixteen standard divisional charts with their purpose and division rule."
)
async def get_vargas():
    """List all varga definitions."""
    return ConfigVargasResponse(
        vargas=[_convert_varga_definition(d) for d in VARGA_DEFINITIONS]
    )


@router.get(
    "/config/yoga-categories",
    response_model=ConfigYogaCategoriesResponse,
    summary="List Yoga Categories",
    description="Get yoga category identifiers and their display labels."
)
async def get_yoga_categories():
    """List yoga categories."""
    return ConfigYogaCategoriesResponse(
        categories=[
            YogaCategoryResponse(id=category.value, label=YOGA_CATEGORY_LABELS[category])
            for category in YogaCategory
        ]
    )


# Kundli Endpoints
@router.post(
    "/kundli/calculate",
    response_model=KundliResponse,
    summary="Calculate Kundli",
    description="""
    Calculate a complete sidereal (Lahiri) birth chart including:
    - Whole-sign houses and planet placements with dignity
    - Running Maha / Antar / Pratyantar Dasha and the Mahadasha timeline
    - Yogas and doshas present in the chart
    - The fifteen divisional charts D2 to D60
    """,
    responses={
        200: {"description": "Successful calculation"},
        422: {"description": "Validation error - invalid input parameters"},
        500: {"description": "Calculation error"},
        503: {"description": "Ephemeris unavailable"}
    }
)
async def calculate_kundli(request: KundliRequest, ephemeris=Depends(get_ephemeris)):
    """Calculate a single kundli."""
    try:
        report = _build_kundli(request, ephemeris)
        return _kundli_response(request, report)
    except KundliAPIException:
        raise
    except Exception as e:
        raise ChartCalculationError(f"Kundli calculation failed: {str(e)}")


@router.post(
    "/kundli/calculate/batch",
    response_model=BatchResponse,
    summary="Calculate Multiple Kundlis",
    description="""
    Calculate multiple kundlis in a single request.

    Each chart is processed independently - partial failures are allowed.
    The response includes individual results for each chart with success/error status,
    plus summary statistics of total, successful, and failed calculations.
    """,
    responses={
        200: {"description": "Batch processing complete (may include partial failures)"},
        422: {"description": "Validation error in request structure"}
    }
)
async def calculate_kundli_batch(request: KundliBatchRequest, ephemeris=Depends(get_ephemeris)):
    """Calculate multiple kundlis in batch."""
    results = []

    for idx, chart_req in enumerate(request.charts):
        try:
            report = _build_kundli(chart_req, ephemeris)
            results.append(BatchResultItem(
                id=chart_req.id or f"chart_{idx}",
                success=True,
                data=_kundli_response(chart_req, report),
                error=None
            ))
        except Exception as e:
            results.append(BatchResultItem(
                id=chart_req.id or f"chart_{idx}",
                success=False,
                data=None,
                error=ErrorDetail(
                    type=type(e).__name__,
                    message=str(e),
                    detail=None
                )
            ))

    return BatchResponse(
        results=results,
        summary=BatchSummary(
            total=len(results),
            successful=sum(1 for r in results if r.success),
            failed=sum(1 for r in results if not r.success)
        )
    )


# Analysis Endpoints
@router.post(
    "/varga/calculate",
    response_model=VargaResponse,
    summary="Calculate Divisional Chart",
    description="""
    Calculate one D-N divisional chart from the birth data.

    The sixteen standard divisions use their classical rules; any other
    positive N uses the plain cyclic division.
    """,
    responses={
        200: {"description": "Successful calculation"},
        422: {"description": "Validation error - invalid input parameters"},
        503: {"description": "Ephemeris unavailable"}
    }
)
async def calculate_varga(request: VargaRequest, ephemeris=Depends(get_ephemeris)):
    """Calculate a single divisional chart."""
    try:
        chart = _build_natal_chart(request, ephemeris)
        varga = compute_varga(chart, request.division)
        definition = get_varga_definition(request.division)
        return VargaResponse(
            definition=_convert_varga_definition(definition) if definition else None,
            chart=_convert_chart(varga)
        )
    except KundliAPIException:
        raise
    except Exception as e:
        raise ChartCalculationError(f"Varga calculation failed: {str(e)}")


@router.post(
    "/yogas/calculate",
    response_model=YogasResponse,
    summary="Detect Yogas",
    description="Evaluate every yoga and dosha rule against the natal chart.",
    responses={
        200: {"description": "Successful calculation"},
        422: {"description": "Validation error - invalid input parameters"},
        503: {"description": "Ephemeris unavailable"}
    }
)
async def calculate_yogas(request: BirthDataRequest, ephemeris=Depends(get_ephemeris)):
    """Detect yogas in a natal chart."""
    try:
        chart = _build_natal_chart(request, ephemeris)
        yogas = [_convert_yoga(y) for y in evaluate_yogas(chart)]
        return YogasResponse(yogas=yogas, count=len(yogas))
    except KundliAPIException:
        raise
    except Exception as e:
        raise ChartCalculationError(f"Yoga evaluation failed: {str(e)}")


@router.post(
    "/dasha/calculate",
    response_model=DashaResponse,
    summary="Calculate Vimshottari Dasha",
    description="""
    Calculate the Vimshottari Dasha periods running at the reference date
    (default: now) and the nine Mahadashas of the birth cycle.
    """,
    responses={
        200: {"description": "Successful calculation"},
        422: {"description": "Validation error - invalid input parameters"},
        503: {"description": "Ephemeris unavailable"}
    }
)
async def calculate_dasha(request: KundliRequest, ephemeris=Depends(get_ephemeris)):
    """Calculate running Dasha periods."""
    try:
        snapshot = ephemeris.compute_natal(request.birth_date, request.latitude,
                                           request.longitude, request.timezone)
        moon = moon_longitude(snapshot)
        reference = to_utc(request.reference_date or _now(), request.timezone)
        result = compute_dasha(moon, snapshot.instant, reference)
        return _convert_dasha(result, vimshottari_timeline(moon, snapshot.instant))
    except KundliAPIException:
        raise
    except Exception as e:
        raise ChartCalculationError(f"Dasha calculation failed: {str(e)}")


# Transit Endpoints
@router.post(
    "/transits/calculate",
    response_model=TransitResponse,
    summary="Calculate Transits",
    description="""
    Map current planet positions onto the natal chart.

    Returns for each planet:
    - Transit sign, degree and retrograde flag
    - House counted from the natal Lagna and from the natal Moon
    - A quality tag (good / neutral / challenging) with a short reading
    """,
    responses={
        200: {"description": "Successful calculation"},
        422: {"description": "Validation error - invalid input parameters"},
        500: {"description": "Calculation error"},
        503: {"description": "Ephemeris unavailable"}
    }
)
async def calculate_transits(request: TransitRequest, ephemeris=Depends(get_ephemeris)):
    """Calculate transits for a specific date."""
    try:
        chart = _build_natal_chart(request.natal_chart, ephemeris)
        result = compute_current_transits(
            ephemeris,
            chart,
            request.transit_date or _now(),
            request.transit_timezone or request.natal_chart.timezone
        )
        return _convert_transits(result, chart)
    except KundliAPIException:
        raise
    except Exception as e:
        raise ChartCalculationError(f"Transit calculation failed: {str(e)}")
