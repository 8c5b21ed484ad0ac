"""Lenient converters for user-entered values.

Partial data entry must never crash a calculation, so malformed values are
replaced with safe defaults and a warning is logged instead of raising.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def coerce_amount(value: object, field: str, allow_negative: bool = False) -> Decimal:
    """Convert a user-entered amount to Decimal, defaulting to zero."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        logger.warning("Non-numeric amount %r for %s; using 0", value, field)
        return ZERO
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float)):
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).replace(",", "").replace("$", "").strip())
    except (InvalidOperation, ValueError):
        logger.warning("Non-numeric amount %r for %s; using 0", value, field)
        return ZERO
    if not amount.is_finite():
        logger.warning("Non-finite amount %r for %s; using 0", value, field)
        return ZERO
    if amount < ZERO and not allow_negative:
        logger.warning("Negative amount %s for %s; using 0", amount, field)
        return ZERO
    return amount


def coerce_optional_amount(value: object, field: str) -> Decimal | None:
    if value is None or value == "":
        return None
    return coerce_amount(value, field)


def coerce_date(value: object, field: str) -> date | None:
    """Parse ISO dates; anything unparseable becomes None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        logger.warning("Malformed date %r for %s; ignoring", value, field)
        return None


def coerce_age(value: object, field: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        age = int(Decimal(str(value)))
    except (InvalidOperation, OverflowError, ValueError):
        logger.warning("Malformed age %r for %s; ignoring", value, field)
        return None
    if age < 0 or age > 130:
        logger.warning("Out-of-range age %r for %s; ignoring", value, field)
        return None
    return age


def coerce_choice(value: object, enum_cls, default, field: str):
    """Map a string onto an enum member, falling back to default."""
    if isinstance(value, enum_cls):
        return value
    if value is None or value == "":
        return default
    text = str(value).strip()
    for member in enum_cls:
        if text == member.value or text.lower() == member.value.lower():
            return member
    logger.warning("Unknown %s %r; using %s", field, value, default.value)
    return default


def coerce_optional_int(value: object, field: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(Decimal(str(value)))
    except (InvalidOperation, OverflowError, ValueError):
        logger.warning("Malformed integer %r for %s; ignoring", value, field)
        return None
