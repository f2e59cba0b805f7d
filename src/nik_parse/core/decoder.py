"""
NIK Decoder

Decodes a 16-digit Indonesian national identity number (Nomor Induk
Kependudukan).

Format: PPKKCCDDMMYYSSSS
    PP   province code
    KK   regency/city code
    CC   district code
    DD   day of birth, +40 for women
    MM   month of birth
    YY   two-digit year of birth
    SSSS serial number

Decoding never raises for bad input. The result is either a ParseSuccess
carrying a ParsedIdentity or a ParseFailure naming the first check that
failed.
"""

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional, Union

from nik_parse.config.region_loader import RegionEntry, RegionTable
from nik_parse.core.derivations import (
    Duration,
    age_on,
    birthday_countdown,
    market_day,
    zodiac_sign,
)


NIK_LENGTH = 16

# Two-digit years below the pivot are 20xx, the rest 19xx
DEFAULT_YEAR_PIVOT = 25

FEMALE_DAY_OFFSET = 40

UNKNOWN_NAME = "TIDAK DIKETAHUI"

_NON_DIGITS = re.compile(r"\D")


class Sex(str, Enum):
    """Sex encoded in the day-of-birth field."""

    MALE = "LAKI-LAKI"
    FEMALE = "PEREMPUAN"


class ParseError(str, Enum):
    """Reason a NIK could not be decoded, in check order."""

    INVALID_LENGTH = "invalid_length"
    UNKNOWN_PROVINCE = "unknown_province"
    UNKNOWN_REGENCY = "unknown_regency"
    UNKNOWN_DISTRICT = "unknown_district"
    INVALID_BIRTH_DATE = "invalid_birth_date"


ERROR_MESSAGES = {
    ParseError.INVALID_LENGTH: "NIK harus 16 digit",
    ParseError.UNKNOWN_PROVINCE: "Kode provinsi tidak ditemukan",
    ParseError.UNKNOWN_REGENCY: "Kode kabupaten/kota tidak ditemukan",
    ParseError.UNKNOWN_DISTRICT: "Kode kecamatan tidak ditemukan",
    ParseError.INVALID_BIRTH_DATE: "Tanggal lahir tidak valid",
}

EMPTY_INPUT_MESSAGE = "NIK tidak boleh kosong"


@dataclass(frozen=True)
class ParsedIdentity:
    """Everything that can be read from a valid NIK.

    Attributes:
        nik: The normalized 16-digit string.
        sex: Sex derived from the day field.
        birth_date: Birth date with the female offset removed.
        region: Resolved region, possibly partially unknown in lenient mode.
        serial: The last four digits.
        age: Age on the decode date.
        next_birthday: Time left until the next birthday.
        zodiac: Tropical zodiac sign.
        market_day: Weekday and pasaran of the birth date.
    """

    nik: str
    sex: Sex
    birth_date: date
    region: RegionEntry
    serial: str
    age: Duration
    next_birthday: Duration
    zodiac: str
    market_day: str

    @property
    def postal_code(self) -> str:
        return self.region.postal_code

    @property
    def birth_year(self) -> int:
        return self.birth_date.year


@dataclass(frozen=True)
class ParseSuccess:
    identity: ParsedIdentity
    message: str = "NIK valid"

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ParseFailure:
    reason: ParseError
    message: str

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def of(cls, reason: ParseError) -> "ParseFailure":
        return cls(reason=reason, message=ERROR_MESSAGES[reason])


ParseResult = Union[ParseSuccess, ParseFailure]


def normalize_nik(candidate: str) -> str:
    """Strip every non-digit character.

    Example:
        >>> normalize_nik("3201-0115 0990-0001")
        '3201011509900001'
    """
    return _NON_DIGITS.sub("", candidate or "")


def expand_year(two_digit_year: int, pivot: int = DEFAULT_YEAR_PIVOT) -> int:
    """Expand a two-digit year using the pivot rule.

    Example:
        >>> expand_year(24), expand_year(25)
        (2024, 1925)
    """
    return 2000 + two_digit_year if two_digit_year < pivot else 1900 + two_digit_year


class NIKDecoder:
    """Decodes NIK strings against a region table.

    Example:
        >>> decoder = NIKDecoder(load_regions_from_yaml(DEFAULT_REGION_PATH))
        >>> result = decoder.decode("3201011509900001", today=date(2026, 10, 19))
        >>> result.identity.sex
        <Sex.MALE: 'LAKI-LAKI'>
    """

    def __init__(
        self,
        regions: RegionTable,
        strict_region: bool = True,
        year_pivot: int = DEFAULT_YEAR_PIVOT,
        clock: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the decoder.

        Args:
            regions: Region reference table.
            strict_region: Fail on unknown region codes. When False the
                unknown levels are reported as TIDAK DIKETAHUI instead.
            year_pivot: Two-digit years below this value map to 2000s.
            clock: Source of "today" when decode() is not given one.
        """
        if not 0 <= year_pivot <= 100:
            raise ValueError(f"year_pivot must be between 0 and 100, got {year_pivot}")
        self.regions = regions
        self.strict_region = strict_region
        self.year_pivot = year_pivot
        self._clock = clock

    def decode(self, candidate: Optional[str], today: Optional[date] = None) -> ParseResult:
        """Decode a candidate NIK.

        Args:
            candidate: Raw input; separators and other non-digits are ignored.
            today: Reference date for age and countdown (defaults to the clock).

        Returns:
            ParseSuccess or ParseFailure.
        """
        if not candidate or not candidate.strip():
            return ParseFailure(ParseError.INVALID_LENGTH, EMPTY_INPUT_MESSAGE)

        nik = normalize_nik(candidate)
        if len(nik) != NIK_LENGTH:
            return ParseFailure.of(ParseError.INVALID_LENGTH)

        region = self._resolve_region(nik[:6])
        if isinstance(region, ParseFailure):
            return region

        day_field = int(nik[6:8])
        sex = Sex.FEMALE if day_field > FEMALE_DAY_OFFSET else Sex.MALE
        day = day_field - FEMALE_DAY_OFFSET if sex is Sex.FEMALE else day_field
        month = int(nik[8:10])
        year = expand_year(int(nik[10:12]), self.year_pivot)

        try:
            birth_date = date(year, month, day)
        except ValueError:
            return ParseFailure.of(ParseError.INVALID_BIRTH_DATE)

        today = today or self._clock()
        identity = ParsedIdentity(
            nik=nik,
            sex=sex,
            birth_date=birth_date,
            region=region,
            serial=nik[12:],
            age=age_on(birth_date, today),
            next_birthday=birthday_countdown(birth_date, today),
            zodiac=zodiac_sign(birth_date.month, birth_date.day),
            market_day=market_day(birth_date),
        )
        return ParseSuccess(identity)

    def _resolve_region(self, code: str) -> Union[RegionEntry, ParseFailure]:
        """Resolve a six-digit region code, failing at the first unknown level."""
        province_code, regency_code, district_code = code[:2], code[2:4], code[4:6]

        entry = self.regions.lookup(code)
        if entry is not None:
            return entry

        province = self.regions.province_name(province_code)
        regency = self.regions.regency_name(code[:4]) if province else None

        if self.strict_region:
            if province is None:
                return ParseFailure.of(ParseError.UNKNOWN_PROVINCE)
            if regency is None:
                return ParseFailure.of(ParseError.UNKNOWN_REGENCY)
            return ParseFailure.of(ParseError.UNKNOWN_DISTRICT)

        return RegionEntry(
            province_code=province_code,
            regency_code=regency_code,
            district_code=district_code,
            province=province or UNKNOWN_NAME,
            regency=regency or UNKNOWN_NAME,
            district=UNKNOWN_NAME,
        )


def decode_nik(
    candidate: Optional[str],
    regions: RegionTable,
    today: Optional[date] = None,
    strict_region: bool = True,
) -> ParseResult:
    """Decode a NIK with a one-off decoder.

    Args:
        candidate: Raw input string.
        regions: Region reference table.
        today: Reference date for derived facts.
        strict_region: Fail on unknown region codes.

    Returns:
        ParseSuccess or ParseFailure.
    """
    return NIKDecoder(regions, strict_region=strict_region).decode(candidate, today=today)
