"""FastAPI app exposing zmanim computation endpoints."""

from __future__ import annotations

import logging
import os
from datetime import date as Date, datetime
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, model_validator

from zmanim_calc.contracts import (
    HorizonConvention,
    InvalidInputError,
    Location,
    MethodSelection,
    ShaahZmanisConvention,
    ZmanimResult,
    resolve_timezone,
)
from zmanim_calc.halacha.conventions import HORIZON_LABELS, SHAAH_ZMANIS_LABELS
from zmanim_calc.halacha.derivation import compute_zmanim
from zmanim_calc.halacha.formatting import ZMAN_LABELS, display_times, relative_descriptions
from zmanim_calc.orchestrate.batch import DEFAULT_MAX_DAYS, DateRange, compute_range

logger = logging.getLogger(__name__)


class LocationRequest(BaseModel):
    """Request-level observer location."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    elevation_m: float = Field(default=0.0, ge=0.0)
    timezone_id: str | None = None
    display_name: str = ""

    def to_contract(self, default_timezone: str) -> Location:
        """Convert API model into Location contract."""
        return Location(
            latitude=self.latitude,
            longitude=self.longitude,
            elevation_m=self.elevation_m,
            timezone_id=self.timezone_id or default_timezone,
            display_name=self.display_name,
        )


class MethodsRequest(BaseModel):
    """Optional per-request convention overrides."""

    sunrise: HorizonConvention | None = None
    sunset: HorizonConvention | None = None
    shaah_zmanis: ShaahZmanisConvention | None = None

    def to_contract(self, defaults: MethodSelection) -> MethodSelection:
        """Merge overrides onto configured defaults."""
        return MethodSelection(
            sunrise=self.sunrise or defaults.sunrise,
            sunset=self.sunset or defaults.sunset,
            shaah_zmanis=self.shaah_zmanis or defaults.shaah_zmanis,
        )


class ZmanimRequest(BaseModel):
    """Request schema for one date."""

    location: LocationRequest
    date: Date | None = None
    methods: MethodsRequest | None = None


class RangeRequest(BaseModel):
    """Request schema for an inclusive date range."""

    location: LocationRequest
    start_date: Date
    end_date: Date
    methods: MethodsRequest | None = None

    @model_validator(mode="after")
    def validate_order(self) -> "RangeRequest":
        """Validate date ordering."""
        if self.start_date > self.end_date:
            raise ValueError("start_date must be <= end_date")
        return self


class ShaahZmanisResponse(BaseModel):
    """Halachic hour for the selected convention."""

    convention: str
    status: str
    minutes: float | None
    day_start: str | None
    day_end: str | None


class ZmanimResponse(BaseModel):
    """Response schema aligned with the ZmanimResult contract."""

    location: dict[str, Any]
    date: str
    methods: dict[str, str]
    zmanim: dict[str, str | None]
    shaah_zmanis: ShaahZmanisResponse
    day_length_minutes: float | None
    night_length_minutes: float | None
    display: dict[str, str]
    relative: dict[str, str]


class RangeResponse(BaseModel):
    """Range response payload."""

    results: list[ZmanimResponse]


class ConventionsResponse(BaseModel):
    """Selectable conventions with display labels."""

    sunrise: dict[str, str]
    sunset: dict[str, str]
    shaah_zmanis: dict[str, str]
    zmanim: dict[str, str]


def _to_response(result: ZmanimResult) -> ZmanimResponse:
    return ZmanimResponse(
        **result.to_dict(),
        display=display_times(result),
        relative=relative_descriptions(result),
    )


def _resolve_default_methods() -> MethodSelection:
    """Resolve default conventions from environment with validation."""
    try:
        return MethodSelection.from_values(
            sunrise=os.getenv("ZMANIM_DEFAULT_SUNRISE_METHOD", "elevation"),
            sunset=os.getenv("ZMANIM_DEFAULT_SUNSET_METHOD", "elevation"),
            shaah_zmanis=os.getenv("ZMANIM_DEFAULT_SHAAH_METHOD", "gra"),
        )
    except InvalidInputError as exc:
        raise ValueError(f"invalid ZMANIM_DEFAULT_* setting: {exc}") from exc


def _resolve_default_timezone() -> str:
    """Resolve the fallback timezone from environment with validation."""
    raw = os.getenv("ZMANIM_DEFAULT_TIMEZONE", "UTC").strip()
    try:
        resolve_timezone(raw)
    except InvalidInputError as exc:
        raise ValueError(f"ZMANIM_DEFAULT_TIMEZONE is invalid: {exc}") from exc
    return raw


def _resolve_max_range_days() -> int:
    """Resolve range cap from environment with validation."""
    raw = os.getenv("ZMANIM_MAX_RANGE_DAYS", str(DEFAULT_MAX_DAYS))
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError("ZMANIM_MAX_RANGE_DAYS must be an integer") from exc
    if value <= 0:
        raise ValueError("ZMANIM_MAX_RANGE_DAYS must be positive")
    return value


def create_app() -> FastAPI:
    """Create and configure the FastAPI app."""
    app = FastAPI(title="Zmanim Calculator API", version="0.1.0")

    default_methods = _resolve_default_methods()
    default_timezone = _resolve_default_timezone()
    max_range_days = _resolve_max_range_days()

    app.state.default_methods = default_methods
    app.state.default_timezone = default_timezone
    app.state.max_range_days = max_range_days
    logger.info(
        "zmanim api configured methods=%s timezone=%s max_range_days=%d",
        default_methods.to_dict(),
        default_timezone,
        max_range_days,
    )

    def _location(payload: LocationRequest) -> Location:
        try:
            return payload.to_contract(default_timezone)
        except InvalidInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

    def _methods(payload: MethodsRequest | None) -> MethodSelection:
        if payload is None:
            return default_methods
        return payload.to_contract(default_methods)

    @app.post("/zmanim", response_model=ZmanimResponse)
    def post_zmanim(payload: ZmanimRequest) -> ZmanimResponse:
        """Compute all zmanim for one date and location."""
        location = _location(payload.location)
        day = payload.date or datetime.now(location.tzinfo).date()
        try:
            result = compute_zmanim(day, location, _methods(payload.methods))
        except InvalidInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _to_response(result)

    @app.post("/zmanim/range", response_model=RangeResponse)
    def post_zmanim_range(payload: RangeRequest) -> RangeResponse:
        """Compute zmanim for every date of an inclusive range."""
        location = _location(payload.location)
        date_range = DateRange(
            start=payload.start_date, end=payload.end_date, max_days=max_range_days
        )
        try:
            results = compute_range(date_range, location, _methods(payload.methods))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return RangeResponse(results=[_to_response(result) for result in results])

    @app.get("/conventions", response_model=ConventionsResponse)
    def get_conventions() -> ConventionsResponse:
        """List selectable conventions and zman labels."""
        horizon = {key.value: label for key, label in HORIZON_LABELS.items()}
        return ConventionsResponse(
            sunrise=horizon,
            sunset=dict(horizon),
            shaah_zmanis={key.value: label for key, label in SHAAH_ZMANIS_LABELS.items()},
            zmanim={key.value: label for key, label in ZMAN_LABELS.items()},
        )

    return app


app = create_app()
