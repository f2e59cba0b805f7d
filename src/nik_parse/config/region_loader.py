"""YAML loader for the Indonesian administrative region table.

The first six digits of a NIK are the province, regency/city and district
codes assigned by the Ministry of Home Affairs. This module loads the
reference table that maps those codes to names and postal codes.

Example YAML configuration:

    provinces:
      "32":
        name: JAWA BARAT
        regencies:
          "01":
            name: KAB. BOGOR
            districts:
              "01": {name: CIBINONG, postal_code: "16911"}
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


DEFAULT_REGION_PATH = Path(__file__).resolve().parent.parent / "data" / "regions.yaml"

_CODE_PATTERN = re.compile(r"^\d{2}$")
_POSTAL_CODE_PATTERN = re.compile(r"^\d{5}$")


@dataclass(frozen=True)
class RegionEntry:
    """A single district with its parent regency and province.

    Attributes:
        province_code: Two-digit province code (e.g. "32").
        regency_code: Two-digit regency/city code within the province.
        district_code: Two-digit district code within the regency.
        province: Province name.
        regency: Regency or city name.
        district: District (kecamatan) name.
        postal_code: Five-digit postal code, empty when unknown.
    """

    province_code: str
    regency_code: str
    district_code: str
    province: str
    regency: str
    district: str
    postal_code: str = ""

    @property
    def code(self) -> str:
        """Six-digit lookup key."""
        return f"{self.province_code}{self.regency_code}{self.district_code}"


class RegionTable:
    """Immutable lookup table of region entries.

    District lookups are exact matches on the six-digit code. Province and
    regency names are also indexed so callers can tell which level of a code
    is unknown.

    Example:
        >>> table = load_regions_from_yaml(DEFAULT_REGION_PATH)
        >>> table.lookup("320101").district
        'CIBINONG'
    """

    def __init__(
        self,
        entries: list[RegionEntry],
        provinces: Optional[dict[str, str]] = None,
        regencies: Optional[dict[str, str]] = None,
    ) -> None:
        self._districts: dict[str, RegionEntry] = {}
        self._provinces: dict[str, str] = dict(provinces or {})
        self._regencies: dict[str, str] = dict(regencies or {})

        for entry in entries:
            if entry.code in self._districts:
                raise ValueError(f"Duplicate district code: {entry.code}")
            self._districts[entry.code] = entry
            self._provinces.setdefault(entry.province_code, entry.province)
            self._regencies.setdefault(
                entry.province_code + entry.regency_code, entry.regency
            )

    def province_name(self, province_code: str) -> Optional[str]:
        """Return the province name for a two-digit code, or None."""
        return self._provinces.get(province_code)

    def regency_name(self, regency_code: str) -> Optional[str]:
        """Return the regency/city name for a four-digit code, or None."""
        return self._regencies.get(regency_code)

    @property
    def province_count(self) -> int:
        return len(self._provinces)

    @property
    def regency_count(self) -> int:
        return len(self._regencies)

    def lookup(self, code: str) -> Optional[RegionEntry]:
        """Return the entry for a six-digit district code, or None."""
        return self._districts.get(code)

    def __contains__(self, code: object) -> bool:
        return code in self._districts

    def __len__(self) -> int:
        return len(self._districts)

    def __iter__(self):
        return iter(self._districts.values())

    def __repr__(self) -> str:
        return (
            f"RegionTable(provinces={self.province_count}, "
            f"regencies={self.regency_count}, districts={len(self._districts)})"
        )


def _require_mapping(value: object, where: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"Invalid {where}: expected dict, got {type(value).__name__}")
    return value


def _require_code(code: object, where: str) -> str:
    # Codes must be quoted; YAML reads an unquoted 01 as the integer 1
    code = str(code)
    if not _CODE_PATTERN.match(code):
        raise ValueError(f"Invalid {where} code {code!r}: expected two digits")
    return code


def _require_name(node: dict, where: str) -> str:
    name = node.get("name")
    if not name or not isinstance(name, str):
        raise ValueError(f"{where} missing required field: name")
    return name.strip()


def parse_regions(data: object) -> RegionTable:
    """Build a RegionTable from already-parsed YAML data.

    Args:
        data: The decoded YAML document.

    Returns:
        The populated RegionTable.

    Raises:
        ValueError: If the structure or any code is invalid.
    """
    if data is None:
        return RegionTable([])

    root = _require_mapping(data, "YAML structure")
    provinces_data = _require_mapping(root.get("provinces", {}), "provinces structure")

    entries: list[RegionEntry] = []
    provinces: dict[str, str] = {}
    regencies: dict[str, str] = {}

    for raw_prov, prov_node in provinces_data.items():
        prov_code = _require_code(raw_prov, "province")
        prov_node = _require_mapping(prov_node, f"province {prov_code}")
        prov_name = _require_name(prov_node, f"Province {prov_code}")
        provinces[prov_code] = prov_name

        regencies_data = _require_mapping(
            prov_node.get("regencies") or {}, f"regencies of {prov_code}"
        )
        for raw_reg, reg_node in regencies_data.items():
            reg_code = _require_code(raw_reg, "regency")
            reg_node = _require_mapping(reg_node, f"regency {prov_code}{reg_code}")
            reg_name = _require_name(reg_node, f"Regency {prov_code}{reg_code}")
            regencies[prov_code + reg_code] = reg_name

            districts_data = _require_mapping(
                reg_node.get("districts") or {}, f"districts of {prov_code}{reg_code}"
            )
            for raw_dist, dist_node in districts_data.items():
                dist_code = _require_code(raw_dist, "district")
                where = f"District {prov_code}{reg_code}{dist_code}"
                dist_node = _require_mapping(dist_node, where)
                postal_code = str(dist_node.get("postal_code") or "")
                if postal_code and not _POSTAL_CODE_PATTERN.match(postal_code):
                    raise ValueError(f"{where} has invalid postal_code: {postal_code!r}")

                entries.append(
                    RegionEntry(
                        province_code=prov_code,
                        regency_code=reg_code,
                        district_code=dist_code,
                        province=prov_name,
                        regency=reg_name,
                        district=_require_name(dist_node, where),
                        postal_code=postal_code,
                    )
                )

    return RegionTable(entries, provinces=provinces, regencies=regencies)


def load_regions_from_yaml(path: Path | str) -> RegionTable:
    """Load the region table from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        The populated RegionTable.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the YAML structure is invalid.
        yaml.YAMLError: If the YAML is malformed.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Region table not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return parse_regions(data)


def load_regions_from_yaml_safe(path: Path | str) -> tuple[RegionTable, Optional[str]]:
    """Load the region table, returning an error message instead of raising.

    Returns:
        Tuple of (table, error_message). On failure the table is empty.
    """
    try:
        return load_regions_from_yaml(path), None
    except FileNotFoundError as e:
        return RegionTable([]), str(e)
    except ValueError as e:
        return RegionTable([]), f"Configuration error: {e}"
    except yaml.YAMLError as e:
        return RegionTable([]), f"YAML parsing error: {e}"


def get_region_path() -> Path:
    """Region table path from NIK_PARSE_REGION_PATH, or the bundled table."""
    configured = os.getenv("NIK_PARSE_REGION_PATH")
    return Path(configured) if configured else DEFAULT_REGION_PATH
