from __future__ import annotations

import math
import re
from typing import Any, Iterable, List, Optional, Sequence

from catalog_display.integrations.contracts.products import Price, ProductRecord

# Sheet columns, in order: A=image, B=name, C=price, D=description
COLUMNS = ("image", "name", "price", "description")

_PRICE_NOISE = re.compile(r"[^\d.,\-]")
_LEADING_FLOAT = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value.strip() if isinstance(value, str) else str(value).strip()


def parse_price(value: Any) -> Price:
    """
    Coerce a sheet cell into a price.

    Numbers coming from the Sheets API are kept as they are. Text such as
    "$5.50" or " 5,50 " is cleaned down to digits, separators and minus signs,
    the first comma becomes a decimal point and the longest leading number is
    used. Anything unparsable or negative is 0.
    """
    if value is None:
        return 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value if math.isfinite(value) else 0

    cleaned = _PRICE_NOISE.sub("", to_text(value)).replace(",", ".", 1)
    match = _LEADING_FLOAT.match(cleaned)
    if not match:
        return 0
    amount = float(match.group(0))
    return amount if amount >= 0 else 0


def normalize_row(row: Sequence[Any]) -> Optional[ProductRecord]:
    """Map one raw row to a ProductRecord, or None when it carries no content."""
    cells: List[Any] = list(row[: len(COLUMNS)]) if row else []
    cells += [None] * (len(COLUMNS) - len(cells))
    image_raw, name_raw, price_raw, desc_raw = cells

    record = ProductRecord(
        image=to_text(image_raw),
        name=to_text(name_raw),
        price=parse_price(price_raw),
        description=to_text(desc_raw),
    )
    if not (record.name or record.image or record.description):
        return None
    return record


def normalize_rows(rows: Optional[Iterable[Any]]) -> List[ProductRecord]:
    products: List[ProductRecord] = []
    for row in rows or []:
        if not isinstance(row, (list, tuple)):
            continue
        record = normalize_row(row)
        if record is not None:
            products.append(record)
    return products
