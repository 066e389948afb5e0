"""
Field extractors for repair tickets.

Each public ``extract_*`` function takes the full OCR text and its zones and
returns a value or None. Patterns live in a tuple per field, highest priority
first; the first one that produces a value wins.
"""

import re
from typing import Optional
from ..invoice_types import InstrumentEntry
from .matchers import DiagnosticLog, collapse_whitespace, find_dates, first_match, to_iso_date
from .regions import STATE_PATTERN
from .segmenter import DocumentZones, split_lines

ZIP_PATTERN = re.compile(r"\b\d{5}(?:-\d{4})?\b")


# ========== INVOICE NUMBER ==========

INVOICE_NUMBER_LABEL = re.compile(r"Invoice\s+Number\s*:\s*(\d+)", re.IGNORECASE)
INVOICE_HASH = re.compile(r"Invoice[ \t]*#[ \t]*:?[ \t]*([A-Za-z0-9]+)", re.IGNORECASE)


def _invoice_number_label(text: str, zones: DocumentZones) -> Optional[str]:
    match = INVOICE_NUMBER_LABEL.search(text)
    return match.group(1) if match else None


def _invoice_hash(text: str, zones: DocumentZones) -> Optional[str]:
    # Five-digit values belong to the "Invoice Number:" numbering
    for match in INVOICE_HASH.finditer(text):
        value = match.group(1)
        if not re.fullmatch(r"\d{5}", value):
            return value
    return None


INVOICE_NUMBER_MATCHERS = (_invoice_number_label, _invoice_hash)


def extract_invoice_number(text: str, zones: DocumentZones, log: DiagnosticLog | None = None) -> Optional[str]:
    return first_match(INVOICE_NUMBER_MATCHERS, text, zones, log=log, field="invoice_number")


# ========== DATE RECEIVED ==========

DATE_LABEL = re.compile(r"Date\s*:\s*(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})\b", re.IGNORECASE)
SERVICE_LOCATION = re.compile(r"service\s+location", re.IGNORECASE)
SERVICE_LOCATION_LOOKBACK = 5


def _date_label(text: str, zones: DocumentZones) -> Optional[str]:
    for match in DATE_LABEL.finditer(text):
        iso = to_iso_date(*match.groups())
        if iso:
            return iso
    return None


def _date_above_service_location(text: str, zones: DocumentZones) -> Optional[str]:
    for index, line in enumerate(zones.lines):
        if not SERVICE_LOCATION.search(line):
            continue
        # Closest line wins, starting with the Service Location line itself
        for candidate in range(index, max(-1, index - SERVICE_LOCATION_LOOKBACK - 1), -1):
            dates = find_dates(zones.lines[candidate])
            if dates:
                return dates[0]
    return None


def _earliest_top_date(text: str, zones: DocumentZones) -> Optional[str]:
    dates = find_dates(zones.top_section)
    return min(dates) if dates else None


DATE_MATCHERS = (_date_label, _date_above_service_location, _earliest_top_date)


def extract_date_received(text: str, zones: DocumentZones, log: DiagnosticLog | None = None) -> Optional[str]:
    return first_match(DATE_MATCHERS, text, zones, log=log, field="date_received")


# ========== CUSTOMER NAME ==========

ATTENTION_LABEL = re.compile(r"Attention[ \t]*:?[ \t]*([^\n\r]+)", re.IGNORECASE)
NAME_NOISE = re.compile(r"[^A-Za-z\s'\-]")
CODE_TOKEN = re.compile(r"\b[A-Z]{2,}\b")
NAME_LABEL_WORDS = re.compile(
    r"\b(?:address|phone|e-?mail|service|location|customer|information|signature|"
    r"date|number|street|invoice|trouble|reported|instructions|technician|description)\b",
    re.IGNORECASE,
)
NAME_WINDOW_AFTER_MARKER = 7
NAME_WINDOW_AT_END = 12


def clean_person_name(line: str) -> Optional[str]:
    """
    Return the cleaned name if ``line`` looks like a person's name.

    A name has at least two words of two or more letters, no digits, no
    all-caps code tokens and no form label words.
    """
    if not line or re.search(r"\d", line):
        return None
    if CODE_TOKEN.search(line) or NAME_LABEL_WORDS.search(line):
        return None
    cleaned = collapse_whitespace(NAME_NOISE.sub("", line))
    parts = cleaned.split()
    if len(parts) < 2:
        return None
    if any(len(re.sub(r"[^A-Za-z]", "", part)) < 2 for part in parts):
        return None
    return cleaned


def _attention_label(text: str, zones: DocumentZones) -> Optional[str]:
    match = ATTENTION_LABEL.search(text)
    if not match:
        return None
    value = re.split(r"\bEmail\b", match.group(1), flags=re.IGNORECASE)[0]
    return value.strip(" \t:-,") or None


def _name_after_customer_marker(text: str, zones: DocumentZones) -> Optional[str]:
    if zones.customer_index is None:
        return None
    start = zones.customer_index + 1
    for line in zones.lines[start:start + NAME_WINDOW_AFTER_MARKER]:
        name = clean_person_name(line.strip())
        if name:
            return name
    return None


def _name_near_end(text: str, zones: DocumentZones) -> Optional[str]:
    for line in zones.lines[-NAME_WINDOW_AT_END:]:
        name = clean_person_name(line.strip())
        if name:
            return name
    return None


CUSTOMER_NAME_MATCHERS = (_attention_label, _name_after_customer_marker, _name_near_end)


def extract_customer_name(text: str, zones: DocumentZones, log: DiagnosticLog | None = None) -> Optional[str]:
    return first_match(CUSTOMER_NAME_MATCHERS, text, zones, log=log, field="customer_name")


# ========== EMAIL ==========

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
STORE_EMAIL_MARKERS = ("springfield", "george", "georges")


def _customer_owned_email(text: str, zones: DocumentZones) -> Optional[str]:
    for email in EMAIL_PATTERN.findall(text):
        if not any(marker in email.lower() for marker in STORE_EMAIL_MARKERS):
            return email
    return None


def _any_email(text: str, zones: DocumentZones) -> Optional[str]:
    emails = EMAIL_PATTERN.findall(text)
    return emails[0] if emails else None


EMAIL_MATCHERS = (_customer_owned_email, _any_email)


def extract_customer_email(text: str, zones: DocumentZones, log: DiagnosticLog | None = None) -> Optional[str]:
    return first_match(EMAIL_MATCHERS, text, zones, log=log, field="customer_email")


# ========== PHONE ==========

NUMBER_LABEL = re.compile(r"(?<!Invoice )Number\s*:\s*(\d{7,})", re.IGNORECASE)
PHONE_PRIMARY_LABEL = re.compile(r"Phone-Primary\s*:\s*([\d ().\-]{10,})", re.IGNORECASE)
PHONE_LABEL = re.compile(
    r"(?:Phone|Number)[ \t]*:?[ \t]*(\(?\d{3}\)?[-. ]?\d{3}[-.]?\d{4})\b", re.IGNORECASE
)
BARE_PHONE_LINE = re.compile(r"^\s*(\d{3}[-.]?\d{3}[-.]?\d{4})\b", re.MULTILINE)


def normalize_phone(raw: str) -> str:
    """Format ten-digit numbers as (XXX) XXX-XXXX; anything else is returned trimmed."""
    digits = re.sub(r"\D", "", raw)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return raw.strip()


def _number_label(text: str, zones: DocumentZones) -> Optional[str]:
    match = NUMBER_LABEL.search(text)
    return normalize_phone(match.group(1)) if match else None


def _phone_primary_label(text: str, zones: DocumentZones) -> Optional[str]:
    match = PHONE_PRIMARY_LABEL.search(zones.customer_section)
    if not match or len(re.sub(r"\D", "", match.group(1))) < 10:
        return None
    return normalize_phone(match.group(1))


def _phone_label(text: str, zones: DocumentZones) -> Optional[str]:
    match = PHONE_LABEL.search(text)
    return normalize_phone(match.group(1)) if match else None


def _bare_phone_line(text: str, zones: DocumentZones) -> Optional[str]:
    match = BARE_PHONE_LINE.search(zones.customer_section)
    return normalize_phone(match.group(1)) if match else None


PHONE_MATCHERS = (_number_label, _phone_primary_label, _phone_label, _bare_phone_line)


def extract_customer_phone(text: str, zones: DocumentZones, log: DiagnosticLog | None = None) -> Optional[str]:
    return first_match(PHONE_MATCHERS, text, zones, log=log, field="customer_phone")


# ========== ADDRESS ==========

ADDRESS_LABEL = re.compile(r"(?<!Email )Address[ \t]*:[ \t]*([^\n\r]+)", re.IGNORECASE)
STREET_LINE = re.compile(
    r"^\d{1,5}\s+[\w\s&,.'#-]*?\b(?:Lane|Ln|Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Way|"
    r"Boulevard|Blvd|Court|Ct|Place|Pl|Circle|Cir|Terrace|Ter|Pike|Parkway|Pkwy)\b",
    re.IGNORECASE,
)
CITY_LINE = re.compile(r"^[A-Za-z][A-Za-z .'\-]*$")
STATE_ZIP_LINE = re.compile(
    r"^(?:[A-Za-z][A-Za-z .'\-]*,?\s+)?(?:[A-Z]{2}(?:\s+\d{5}(?:-\d{4})?)?|\d{5}(?:-\d{4})?)$"
)
ADDRESS_STOP_LINE = re.compile(
    r"^\s*(?:phone|e-?mail|signature|number|date|service|item|trouble|attention|customer|invoice)\b",
    re.IGNORECASE,
)
# Street lines of the two store addresses printed on tickets
STORE_ADDRESS_MARKERS = ("707 baltimore pike", "150 e wynnewood rd")
ADDRESS_MAX_EXTRA_LINES = 3
ADDRESS_MAX_SCAN_LINES = 6


def _address_label(text: str, zones: DocumentZones) -> Optional[str]:
    match = ADDRESS_LABEL.search(text)
    if not match:
        return None
    value = match.group(1).strip().rstrip(",").strip()
    if not value:
        return None
    if not STATE_PATTERN.search(value) and not ZIP_PATTERN.search(value):
        value = f"{value}, PA"
    return value


def _is_store_address(street: str) -> bool:
    normalized = collapse_whitespace(re.sub(r"[^\w\s]", " ", street.lower()))
    return any(marker in normalized for marker in STORE_ADDRESS_MARKERS)


def _street_address_block(text: str, zones: DocumentZones) -> Optional[str]:
    """
    A street line followed by at most one bare city line, then state/ZIP
    lines. Anything else after the street (a name, a label) ends the block.
    """
    lines = split_lines(zones.customer_section)
    for index, line in enumerate(lines):
        street = line.strip()
        if not STREET_LINE.match(street) or _is_store_address(street):
            continue

        parts = [street.rstrip(",")]
        has_city = False
        for follow in lines[index + 1:index + 1 + ADDRESS_MAX_SCAN_LINES]:
            follow = follow.strip().rstrip(",")
            if not follow:
                continue
            if ADDRESS_STOP_LINE.match(follow):
                break
            if STATE_ZIP_LINE.match(follow):
                parts.append(follow)
                if ZIP_PATTERN.search(follow):
                    break
                has_city = True
            elif CITY_LINE.match(follow) and not has_city:
                parts.append(follow)
                has_city = True
            else:
                break
            if len(parts) > ADDRESS_MAX_EXTRA_LINES:
                break

        if len(parts) >= 2:
            return ", ".join(parts)
    return None


ADDRESS_MATCHERS = (_address_label, _street_address_block)


def extract_customer_address(text: str, zones: DocumentZones, log: DiagnosticLog | None = None) -> Optional[str]:
    return first_match(ADDRESS_MATCHERS, text, zones, log=log, field="customer_address")


# ========== REPAIR DESCRIPTION ==========

SERVICE_LABEL = re.compile(r"Service[ \t]*:[ \t]*([^\n\r]+)", re.IGNORECASE)
TROUBLE_HEADER = re.compile(r"Trouble\s+Reported[ \t]*:?", re.IGNORECASE)
TROUBLE_STOP = re.compile(r"Special\s+Instructions|Technician\s+Comments|Item\s+is\s+being", re.IGNORECASE)
STORE_NAME = re.compile(r"george'?s|delco\s+music", re.IGNORECASE)
SEPARATOR_LINE = re.compile(r"^[\W_]+$")
NUMBER_LINE = re.compile(r"^[\d\s.,$#/\-]+$")
LOOSE_SERVICE = re.compile(r"\bService\b[ \t]+(?!Location)([^\n\r]{10,200})", re.IGNORECASE)


def _is_noise_line(line: str) -> bool:
    stripped = line.strip()
    return (
        not stripped
        or bool(STORE_NAME.search(stripped))
        or bool(SEPARATOR_LINE.match(stripped))
        or bool(NUMBER_LINE.match(stripped))
    )


def _service_label(text: str, zones: DocumentZones) -> Optional[str]:
    match = SERVICE_LABEL.search(text)
    if not match:
        return None
    return match.group(1).strip() or None


def _trouble_reported(text: str, zones: DocumentZones) -> Optional[str]:
    section = zones.trouble_section
    if not section:
        return None
    header = TROUBLE_HEADER.search(section)
    body = section[header.end():] if header else section
    stop = TROUBLE_STOP.search(body)
    if stop:
        body = body[:stop.start()]
    kept = [line.strip() for line in body.splitlines() if not _is_noise_line(line)]
    return collapse_whitespace(" ".join(kept)) or None


def _loose_service(text: str, zones: DocumentZones) -> Optional[str]:
    match = LOOSE_SERVICE.search(text)
    if not match:
        return None
    return match.group(1).strip() or None


REPAIR_DESCRIPTION_MATCHERS = (_service_label, _trouble_reported, _loose_service)


def extract_repair_description(text: str, zones: DocumentZones, log: DiagnosticLog | None = None) -> Optional[str]:
    return first_match(REPAIR_DESCRIPTION_MATCHERS, text, zones, log=log, field="repair_description")


# ========== INSTRUMENT ==========

ITEM_DESCRIPTION = re.compile(r"Item\s+Description[ \t]*:?[ \t]*([^\n\r]*)", re.IGNORECASE)
SERIAL_NUMBER = re.compile(r"Serial\s*#\s*:?\s*([A-Za-z0-9\-]+)", re.IGNORECASE)
OCR_CORRECTIONS = {"Fernandez": "Fernandes"}
BOUNDARY_PUNCTUATION = " \t-:|;/.,"
SERIAL_MAX_DESCRIPTION = 50
INSTRUMENT_KEYWORDS = (
    ("guitar", "Guitar"),
    ("bass", "Bass"),
    ("violin", "Violin"),
    ("cello", "Cello"),
)
GUITAR_BRAND_HINTS = ("fernandes", "ravelle")
DEFAULT_INSTRUMENT_TYPE = "Guitar"


def _apply_ocr_corrections(value: str) -> str:
    for wrong, right in OCR_CORRECTIONS.items():
        value = re.sub(re.escape(wrong), right, value, flags=re.IGNORECASE)
    return value


def _item_description(text: str, zones: DocumentZones) -> Optional[str]:
    top = zones.top_section
    match = ITEM_DESCRIPTION.search(top)
    if not match:
        return None

    value = match.group(1)
    after = top[match.end():]
    if not value.strip(BOUNDARY_PUNCTUATION):
        # Label alone on its line: the value is on the next non-empty line
        following = [line for line in after.splitlines() if line.strip()]
        if not following or ":" in following[0]:
            return None
        value = following[0]

    serial = SERIAL_NUMBER.search(value)
    if serial:
        value = value[:serial.start()]
    else:
        serial = SERIAL_NUMBER.search(after)

    description = _apply_ocr_corrections(collapse_whitespace(value.strip(BOUNDARY_PUNCTUATION)))
    if not description:
        return None
    if serial and len(description) < SERIAL_MAX_DESCRIPTION:
        description = f"{description} (Serial: {serial.group(1)})"
    return description


def infer_instrument_type(description: str, repair_description: str | None = None) -> str:
    haystack = f"{description} {repair_description or ''}".lower()
    for keyword, instrument_type in INSTRUMENT_KEYWORDS:
        if keyword in haystack:
            return instrument_type
    if any(brand in haystack for brand in GUITAR_BRAND_HINTS):
        return "Guitar"
    return DEFAULT_INSTRUMENT_TYPE


def extract_instrument(
    text: str,
    zones: DocumentZones,
    repair_description: str | None = None,
    log: DiagnosticLog | None = None,
) -> Optional[InstrumentEntry]:
    """
    Build the instrument entry from the "Item Description" label.

    Falls back to the repair description for the entry's description; returns
    None when neither is available.
    """
    description = first_match((_item_description,), text, zones, log=log, field="instrument_description")
    final_description = description or repair_description
    if not final_description:
        return None

    instrument_type = infer_instrument_type(description or "", repair_description)
    if log is not None:
        log.add(f"instrument: type {instrument_type!r} for {final_description!r}")
    return InstrumentEntry(type=instrument_type, description=final_description)
