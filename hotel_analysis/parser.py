import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from hotel_analysis.models import BookingRecord

logger = logging.getLogger(__name__)

DELIMITER = ","
MIN_COLUMNS = 24
DEFAULT_ENCODING = "ISO-8859-1"

# 0-based column positions in the booking export
COL_BOOKING_ID = 0
COL_ORIGIN_COUNTRY = 6
COL_DESTINATION_COUNTRY = 9
COL_DESTINATION_CITY = 10
COL_ROOMS = 15
COL_HOTEL_NAME = 16
COL_BOOKING_PRICE = 20
COL_DISCOUNT = 21
COL_PROFIT_MARGIN = 23


@dataclass
class ParseResult:
    bookings: List[BookingRecord] = field(default_factory=list)
    skipped: int = 0

    @property
    def loaded(self) -> int:
        return len(self.bookings)


def _parse_decimal(text: str) -> float:
    # float() also takes "nan", "inf" and "1_000"; none of those are prices
    if "_" in text:
        raise ValueError(f"not a decimal: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"not a finite decimal: {text!r}")
    return value


def _parse_int(text: str) -> int:
    if "_" in text:
        raise ValueError(f"not an integer: {text!r}")
    return int(text)


def parse_discount(text: str) -> float:
    """Convert a percentage string such as "15%" into a fraction (0.15).

    Raises ValueError when the remaining text is not a number.
    """
    return _parse_decimal(text.replace("%", "")) / 100.0


def parse_line(line: str) -> Optional[BookingRecord]:
    """Parse one data line into a BookingRecord, or None if it must be skipped.

    The split is naive: quoted fields containing commas are not supported, so
    such lines usually end up with the wrong column count or fail conversion.
    """
    if not line.strip():
        return None

    cols = [c.strip() for c in line.split(DELIMITER)]
    if len(cols) < MIN_COLUMNS:
        return None

    try:
        return BookingRecord(
            booking_id=cols[COL_BOOKING_ID],
            origin_country=cols[COL_ORIGIN_COUNTRY],
            destination_country=cols[COL_DESTINATION_COUNTRY],
            destination_city=cols[COL_DESTINATION_CITY],
            hotel_name=cols[COL_HOTEL_NAME],
            booking_price=_parse_decimal(cols[COL_BOOKING_PRICE]),
            discount=parse_discount(cols[COL_DISCOUNT]),
            profit_margin=_parse_decimal(cols[COL_PROFIT_MARGIN]),
            rooms=_parse_int(cols[COL_ROOMS]),
        )
    except ValueError:
        return None


def parse_lines(lines: Iterable[str], first_line_number: int = 2) -> ParseResult:
    """Parse data lines (header already removed), keeping input order."""
    result = ParseResult()
    for line_number, line in enumerate(lines, start=first_line_number):
        record = parse_line(line)
        if record is None:
            result.skipped += 1
            logger.debug("Skipping line %d: malformed or unparsable", line_number)
            continue
        result.bookings.append(record)
    return result


def load_bookings(path: Path, encoding: str = DEFAULT_ENCODING) -> ParseResult:
    """Read a booking export from disk.

    The first line is always treated as a header and discarded. Errors opening
    or decoding the file propagate to the caller.
    """
    path = Path(path)
    with path.open("r", encoding=encoding) as f:
        next(f, None)  # header
        result = parse_lines(line.rstrip("\n") for line in f)
    logger.info(
        "Loaded %d bookings from %s (%d lines skipped)",
        result.loaded,
        path,
        result.skipped,
    )
    return result
