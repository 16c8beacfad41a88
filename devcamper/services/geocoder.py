from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

import httpx

from devcamper.core.config import settings

_LOG = logging.getLogger("devcamper.geocoder")

EARTH_RADIUS_MILES = 3963.0


class GeocodingError(Exception):
    pass


@dataclass
class GeoLocation:
    latitude: float
    longitude: float
    formatted_address: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None


def _mapquest_location(payload: dict[str, Any]) -> GeoLocation | None:
    results = payload.get("results") or []
    if not results:
        return None
    locations = results[0].get("locations") or []
    if not locations:
        return None
    loc = locations[0]
    lat_lng = loc.get("latLng") or {}
    if lat_lng.get("lat") is None or lat_lng.get("lng") is None:
        return None
    street = str(loc.get("street") or "").strip() or None
    city = str(loc.get("adminArea5") or "").strip() or None
    state = str(loc.get("adminArea3") or "").strip() or None
    zipcode = str(loc.get("postalCode") or "").strip() or None
    country = str(loc.get("adminArea1") or "").strip() or None
    parts = [part for part in (street, city, " ".join(p for p in (state, zipcode) if p), country) if part]
    return GeoLocation(
        latitude=float(lat_lng["lat"]),
        longitude=float(lat_lng["lng"]),
        formatted_address=", ".join(parts) or None,
        street=street,
        city=city,
        state=state,
        zipcode=zipcode,
        country=country,
    )


def _geocode_mapquest(address: str) -> GeoLocation | None:
    key = str(settings.GEOCODER_API_KEY or "").strip()
    if not key:
        raise GeocodingError("GEOCODER_API_KEY is not set")
    try:
        with httpx.Client(timeout=float(settings.GEOCODER_TIMEOUT_SECONDS)) as client:
            response = client.get(settings.GEOCODER_URL, params={"key": key, "location": address, "maxResults": 1})
    except Exception as exc:
        raise GeocodingError(f"Geocoder request failed: {exc}") from exc
    if response.status_code >= 400:
        raise GeocodingError(f"Geocoder returned HTTP {response.status_code}")
    try:
        payload = response.json()
    except ValueError as exc:
        raise GeocodingError("Geocoder returned invalid JSON") from exc
    return _mapquest_location(payload)


def geocode(address: str) -> GeoLocation | None:
    text = str(address or "").strip()
    if not text:
        return None
    provider = str(settings.GEOCODER_PROVIDER or "dummy").strip().lower()
    if provider in {"", "dummy", "mock"}:
        _LOG.warning("[GEOCODER MOCK] address=%s not resolved", text)
        return None
    if provider == "mapquest":
        return _geocode_mapquest(text)
    raise GeocodingError(f"Unknown GEOCODER_PROVIDER: {provider}")


def distance_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance (haversine)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(min(1.0, a)))
