"""Numeric coercion for loosely-typed record fields"""

import logging
import math
from typing import Any, Optional


def parse_number(value: Any, field_name: str = "value") -> Optional[float]:
    """
    Parse a price or quantity, returning None when there is no usable number.

    None, booleans and blank strings are treated as absent. Unparsable and
    non-finite values are logged as data-quality notes.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            logging.warning(
                "Unparsable numeric field",
                extra={"step": "data_quality", "reason": "non_numeric", "field": field_name, "raw_value": str(value)},
            )
            return None

    if math.isnan(number) or math.isinf(number):
        logging.warning(
            "Non-finite numeric field",
            extra={"step": "data_quality", "reason": "non_numeric", "field": field_name, "raw_value": str(value)},
        )
        return None

    return number


def coerce_number(value: Any, field_name: str = "value") -> float:
    """
    Parse a price or quantity the way the records API sends it.

    Numbers pass through, numeric strings are parsed ("125.50"), and anything
    else (None, "", "n/a", NaN) becomes 0.0.
    """
    number = parse_number(value, field_name)
    return 0.0 if number is None else number
