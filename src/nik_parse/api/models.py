"""
Pydantic models for the NIK-PARSE HTTP API.

Field names follow the public JSON contract (Indonesian keys such as
``pesan`` and ``kelamin``).
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from nik_parse.core.decoder import ParsedIdentity, ParseFailure
from nik_parse.core.derivations import format_age, format_countdown


# ============================================================================
# NIK Parse Models
# ============================================================================

class NIKParseRequest(BaseModel):
    """Request body for the parse endpoint."""

    nik: str = Field(..., description="Candidate NIK, 16 digits")

    @field_validator("nik", mode="before")
    @classmethod
    def coerce_number(cls, value):
        # JSON clients sometimes send the NIK as a number
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class NIKExtraData(BaseModel):
    """Derived facts block (``tambahan``)."""

    kodepos: str = Field(..., description="Postal code of the district")
    pasaran: str = Field(..., description="Weekday and Javanese market day of birth")
    usia: str = Field(..., description="Age in years, months and days")
    ultah: str = Field(..., description="Countdown to the next birthday")
    zodiak: str = Field(..., description="Zodiac sign")
    tahunLahir: str = Field(..., description="Birth year")
    tempatLahir: str = Field(..., description="Province of birth")


class NIKData(BaseModel):
    """Decoded NIK fields."""

    nik: str
    kelamin: str = Field(..., description="LAKI-LAKI or PEREMPUAN")
    lahir: str = Field(..., description="Birth date as DD/MM/YYYY")
    provinsi: str
    kotakab: str = Field(..., description="Regency or city")
    kecamatan: str = Field(..., description="District")
    uniqcode: str = Field(..., description="Serial digits")
    tambahan: NIKExtraData

    @classmethod
    def from_identity(cls, identity: ParsedIdentity) -> "NIKData":
        region = identity.region
        return cls(
            nik=identity.nik,
            kelamin=identity.sex.value,
            lahir=identity.birth_date.strftime("%d/%m/%Y"),
            provinsi=region.province,
            kotakab=region.regency,
            kecamatan=region.district,
            uniqcode=identity.serial,
            tambahan=NIKExtraData(
                kodepos=identity.postal_code,
                pasaran=identity.market_day,
                usia=format_age(identity.age),
                ultah=format_countdown(identity.next_birthday),
                zodiak=identity.zodiac,
                tahunLahir=str(identity.birth_year),
                tempatLahir=region.province,
            ),
        )


class NIKSuccessResponse(BaseModel):
    status: Literal["success"] = "success"
    pesan: str
    data: NIKData


class NIKErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    pesan: str

    @classmethod
    def from_failure(cls, failure: ParseFailure) -> "NIKErrorResponse":
        return cls(pesan=failure.message)


# ============================================================================
# Visitor Models
# ============================================================================

class VisitRequest(BaseModel):
    """Request body for recording a visit."""

    page: Optional[str] = Field(None, description="Requested page path")


class VisitResponse(BaseModel):
    success: bool


class VisitorRecordModel(BaseModel):
    ip: str
    userAgent: str
    timestamp: str
    page: str


class VisitorStatsResponse(BaseModel):
    """Aggregate visitor counts."""

    total: int
    unique: int
    today: int
    recent: list[VisitorRecordModel] = Field(
        default_factory=list, description="Most recent visits, newest first"
    )


# ============================================================================
# Service Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    regions: int = Field(0, description="District entries in the region table")
