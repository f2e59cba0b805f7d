"""Core NIK decoding for NIK-PARSE."""

from nik_parse.core.decoder import (
    NIKDecoder,
    ParsedIdentity,
    ParseError,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    Sex,
    decode_nik,
    expand_year,
    normalize_nik,
)
from nik_parse.core.derivations import Duration, market_day, zodiac_sign

__all__ = [
    "NIKDecoder",
    "ParsedIdentity",
    "ParseError",
    "ParseFailure",
    "ParseResult",
    "ParseSuccess",
    "Sex",
    "decode_nik",
    "expand_year",
    "normalize_nik",
    "Duration",
    "market_day",
    "zodiac_sign",
]
