"""
NIK-PARSE: Indonesian national identity number parser

Decodes a 16-digit NIK into sex, birth date, region and derived facts,
and serves it over HTTP together with a small visitor counter.
"""

__version__ = "1.0.0"

from nik_parse.core.decoder import (
    NIKDecoder,
    ParsedIdentity,
    ParseFailure,
    ParseSuccess,
    decode_nik,
)
from nik_parse.config.region_loader import RegionEntry, RegionTable, load_regions_from_yaml

__all__ = [
    "NIKDecoder",
    "ParsedIdentity",
    "ParseFailure",
    "ParseSuccess",
    "decode_nik",
    "RegionEntry",
    "RegionTable",
    "load_regions_from_yaml",
]
