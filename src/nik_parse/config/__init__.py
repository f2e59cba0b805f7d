"""Configuration module for NIK-PARSE."""

from nik_parse.config.region_loader import (
    DEFAULT_REGION_PATH,
    RegionEntry,
    RegionTable,
    get_region_path,
    load_regions_from_yaml,
    load_regions_from_yaml_safe,
)

__all__ = [
    "DEFAULT_REGION_PATH",
    "RegionEntry",
    "RegionTable",
    "get_region_path",
    "load_regions_from_yaml",
    "load_regions_from_yaml_safe",
]
