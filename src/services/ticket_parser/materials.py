"""
Materials/services table parsing.

OCR flattens the ticket's items table into loosely spaced lines such as
``Guitar strings 3 $8.50 $25.50``. Each line is parsed on its own: the last
two dollar amounts are read as unit price and line total, and the printed
quantity is checked against total / unit price. When the two disagree the
computed quantity wins, unless the printed quantity is 1.

Every decision is written to the diagnostic log so bad extractions can be
traced back to the line that caused them.
"""

import math
import re
from typing import Iterable, Optional
from ..invoice_types import MaterialLine
from .matchers import DiagnosticLog, collapse_whitespace

HEADER_LINE = re.compile(
    r"^(?:Description|Quantity|Unit|Price|Cost|Total|Subtotal|Invoice|Date|Service|"
    r"Address|Number|Attention|Item)\b",
    re.IGNORECASE,
)
PRICE_PATTERN = re.compile(r"\$\s?(\d[\d,]*(?:\.\d+)?)")
PLAIN_NUMBER = re.compile(r"(?<![\w.,/\-])(\d{1,3})(?![\w.,/\-])")
TRAILING_NUMBERS = re.compile(r"(?:\s+\d+(?:\.\d+)?)+\s*$")
SERVICE_CATEGORY_PREFIXES = ("private lessons", "instrument repairs", "recording services", "lessons")
DESCRIPTION_BOUNDARY = " \t-:|;/"
MIN_LINE_LENGTH = 3
MAX_PLAIN_QUANTITY = 999


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _parse_amount(raw: str) -> float:
    return float(raw.replace(",", ""))


def clean_description(line: str) -> str:
    """Strip prices, trailing numbers, one service-category prefix and boundary punctuation."""
    description = PRICE_PATTERN.sub(" ", line)
    description = TRAILING_NUMBERS.sub("", description.rstrip())
    description = description.strip()
    lowered = description.lower()
    for prefix in SERVICE_CATEGORY_PREFIXES:
        if lowered.startswith(prefix):
            description = description[len(prefix):]
            break
    return collapse_whitespace(description.strip(DESCRIPTION_BOUNDARY))


def parse_material_line(line: str, log: DiagnosticLog | None = None) -> Optional[MaterialLine]:
    """Parse a single table line, or return None when it is not a usable row."""
    log = log if log is not None else DiagnosticLog()
    line = line.strip()

    if not line:
        log.add("materials: skipped blank line")
        return None
    if len(line) < MIN_LINE_LENGTH:
        log.add(f"materials: skipped short line {line!r}")
        return None
    if HEADER_LINE.match(line):
        log.add(f"materials: skipped header line {line!r}")
        return None

    price_matches = [_parse_amount(m) for m in PRICE_PATTERN.findall(line)]
    if not price_matches:
        log.add(f"materials: no dollar amount in {line!r}")
        return None

    remainder = PRICE_PATTERN.sub(" ", line)
    plain_number_matches = [
        int(n) for n in PLAIN_NUMBER.findall(remainder) if 1 <= int(n) <= MAX_PLAIN_QUANTITY
    ]

    if len(price_matches) < 2:
        log.add(f"materials: rejected {line!r}, need unit price and total but found {len(price_matches)} amount")
        return None

    unit_price = price_matches[-2]
    total_price = price_matches[-1]
    if unit_price <= 0:
        log.add(f"materials: rejected {line!r}, unit price {unit_price:.2f} is not positive")
        return None

    calculated = _round_half_up(total_price / unit_price)
    if plain_number_matches:
        candidate = plain_number_matches[-1]
        if calculated == candidate or candidate == 1:
            quantity, price = candidate, unit_price
            log.add(f"materials: quantity {candidate} accepted (total/unit = {calculated}) in {line!r}")
        else:
            quantity, price = max(1, calculated), unit_price
            log.add(
                f"materials: printed quantity {candidate} overridden by total/unit = {quantity} in {line!r}"
            )
    elif len(price_matches) >= 2:
        quantity, price = max(1, calculated), unit_price
        log.add(f"materials: no quantity token, total/unit = {quantity} in {line!r}")
    else:
        quantity, price = 1, price_matches[0]
        log.add(f"materials: single price, quantity 1 in {line!r}")

    description = clean_description(line)
    if quantity <= 0 or price <= 0 or len(description) <= 2:
        log.add(
            f"materials: rejected {line!r} (description={description!r}, quantity={quantity}, unit_cost={price:.2f})"
        )
        return None

    log.add(f"materials: accepted {description!r} quantity={quantity} unit_cost={price:.2f}")
    return MaterialLine(description=description, quantity=quantity, unit_cost=price)


def parse_materials(lines: Iterable[str], log: DiagnosticLog | None = None) -> list[MaterialLine]:
    """Parse every line and keep the accepted rows in document order."""
    log = log if log is not None else DiagnosticLog()
    materials = []
    for line in lines:
        row = parse_material_line(line, log)
        if row is not None:
            materials.append(row)
    log.add(f"materials: {len(materials)} row(s) accepted")
    return materials
