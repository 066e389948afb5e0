"""
Split raw OCR text into the logical zones of a repair ticket.

Tickets have a header block, a "Trouble Reported" block and a
"CUSTOMER INFORMATION" block. Markers are often missing or mangled by OCR, so
each zone has a fallback instead of an error.
"""

import re
from dataclasses import dataclass
from typing import Optional

TROUBLE_MARKER = re.compile(r"trouble\s+reported", re.IGNORECASE)
CUSTOMER_MARKER = re.compile(r"customer\s+information", re.IGNORECASE)
ITEM_DESCRIPTION_MARKER = re.compile(r"item\s+description", re.IGNORECASE)


@dataclass(frozen=True)
class DocumentZones:
    lines: tuple[str, ...]
    top_section: str
    trouble_section: str
    customer_section: str
    trouble_index: Optional[int] = None
    customer_index: Optional[int] = None
    item_description_index: Optional[int] = None


def split_lines(text: str) -> tuple[str, ...]:
    return tuple((text or "").splitlines())


def segment_text(text: str) -> DocumentZones:
    """
    Compute the zones of a ticket in one pass over its lines.

    - top: lines before "Trouble Reported"; without that marker, everything
      before the literal word "Trouble", or the whole text
    - trouble: from "Trouble Reported" up to "CUSTOMER INFORMATION" (or the
      end); empty when there is no trouble marker
    - customer: from "CUSTOMER INFORMATION" to the end, or the whole text
    """
    text = text or ""
    lines = split_lines(text)

    trouble_index = customer_index = item_index = None
    for index, line in enumerate(lines):
        if trouble_index is None and TROUBLE_MARKER.search(line):
            trouble_index = index
        if customer_index is None and CUSTOMER_MARKER.search(line):
            customer_index = index
        if item_index is None and ITEM_DESCRIPTION_MARKER.search(line):
            item_index = index

    if trouble_index is not None:
        top_section = "\n".join(lines[:trouble_index])
    else:
        cut = text.find("Trouble")
        top_section = text[:cut] if cut != -1 else text

    trouble_section = ""
    if trouble_index is not None:
        end = customer_index if customer_index is not None and customer_index > trouble_index else len(lines)
        trouble_section = "\n".join(lines[trouble_index:end])

    if customer_index is not None:
        customer_section = "\n".join(lines[customer_index:])
    else:
        customer_section = text

    return DocumentZones(
        lines=lines,
        top_section=top_section,
        trouble_section=trouble_section,
        customer_section=customer_section,
        trouble_index=trouble_index,
        customer_index=customer_index,
        item_description_index=item_index,
    )
