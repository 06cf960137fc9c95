"""Dashboard request models."""

from typing import Optional

from pydantic import BaseModel, Field


class LocateRequest(BaseModel):
    """Device coordinates reported by the browser, if geolocation succeeded."""

    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)


class SearchRequest(BaseModel):
    """Free-text place name to show."""

    query: str = Field(..., max_length=200, description="City name, e.g. 'Paris'")
