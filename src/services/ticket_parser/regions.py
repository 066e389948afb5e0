"""
Service-area check for extracted customer addresses.

The shop serves Delaware County, PA. An address is plausible when it names
Pennsylvania and one of the county's municipalities or postal place names.
The result is advisory and never causes an address to be dropped.
"""

import re

SERVICE_AREA_MUNICIPALITIES = (
    "Aldan",
    "Aston",
    "Bethel",
    "Brookhaven",
    "Chadds Ford",
    "Chester",
    "Chester Heights",
    "Chester Township",
    "Clifton Heights",
    "Collingdale",
    "Colwyn",
    "Concord",
    "Darby",
    "Darby Township",
    "East Lansdowne",
    "Eddystone",
    "Edgmont",
    "Folcroft",
    "Glenolden",
    "Haverford",
    "Lansdowne",
    "Lower Chichester",
    "Marcus Hook",
    "Marple",
    "Media",
    "Middletown",
    "Millbourne",
    "Morton",
    "Nether Providence",
    "Newtown",
    "Norwood",
    "Parkside",
    "Prospect Park",
    "Radnor",
    "Ridley",
    "Ridley Park",
    "Rose Valley",
    "Rutledge",
    "Sharon Hill",
    "Springfield",
    "Swarthmore",
    "Thornbury",
    "Tinicum",
    "Trainer",
    "Upland",
    "Upper Chichester",
    "Upper Darby",
    "Upper Providence",
    "Yeadon",
    "Broomall",
    "Drexel Hill",
    "Havertown",
    "Newtown Square",
    "Wallingford",
    "Glen Mills",
    "Boothwyn",
    "Folsom",
    "Secane",
    "Wynnewood",
    "Bryn Mawr",
)

STATE_PATTERN = re.compile(r"\bPA\b|Pennsylvania", re.IGNORECASE)

_MUNICIPALITY_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(name) for name in SERVICE_AREA_MUNICIPALITIES) + r")\b",
    re.IGNORECASE,
)


def is_service_area_address(address: str | None) -> bool:
    """True when the address names Pennsylvania and a known county municipality."""
    if not address:
        return False
    return bool(STATE_PATTERN.search(address)) and bool(_MUNICIPALITY_PATTERN.search(address))
