"""Request and result models shared by the gateway and the resolver.

All models are frozen. ``WeatherResult`` serializes with the wire keys
``temp_C``/``temp_F``/``temp_K`` and is relayed by the gateway unchanged.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, StrictStr

from cepweather.domain.temperature import convert


class ServiceName(StrEnum):
    """The two deployable services."""

    GATEWAY = "gateway"
    RESOLVER = "resolver"


class PostalCodeRequest(BaseModel):
    """Gateway request body: ``{"cep": "01310900"}``."""

    model_config = {"frozen": True}

    cep: StrictStr


class DirectoryLookupResult(BaseModel):
    """City resolved by the postal directory."""

    model_config = {"frozen": True}

    city: str


class TemperatureLookupResult(BaseModel):
    """Current Celsius temperature reported by the weather API."""

    model_config = {"frozen": True}

    temp_c: float = Field(allow_inf_nan=False)


class WeatherResult(BaseModel):
    """Composed response of both services."""

    model_config = {"frozen": True, "populate_by_name": True}

    city: str
    temp_c: float = Field(alias="temp_C", allow_inf_nan=False)
    temp_f: float = Field(alias="temp_F", allow_inf_nan=False)
    temp_k: float = Field(alias="temp_K", allow_inf_nan=False)

    @classmethod
    def from_celsius(cls, city: str, temp_c: float) -> WeatherResult:
        """Build a result whose Fahrenheit and Kelvin values are derived from *temp_c*."""
        temp_f, temp_k = convert(temp_c)
        return cls(city=city, temp_c=temp_c, temp_f=temp_f, temp_k=temp_k)

    def to_wire(self) -> dict[str, str | float]:
        return self.model_dump(by_alias=True)
