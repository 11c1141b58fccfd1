"""Human-readable location descriptions fed into suggestion prompts."""

from typing import Optional


UNKNOWN_LOCATION = "Unknown"


def describe_location(
    city: Optional[str] = None,
    region: Optional[str] = None,
    country: Optional[str] = None,
    sub_administrative_area: Optional[str] = None,
) -> str:
    """Join reverse-geocoded parts as "City, Region, Country".

    The city falls back to the sub-administrative area (county). Missing or
    blank parts are skipped; with nothing left the result is "Unknown".
    """
    parts = [city or sub_administrative_area, region, country]
    present = [p.strip() for p in parts if p and p.strip()]
    return ", ".join(present) if present else UNKNOWN_LOCATION
