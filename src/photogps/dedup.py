"""Coordinate rounding and de-duplication for the geographic export."""

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, List, Set, Tuple

from .models import LocationRecord


def round_coordinate(value: float, precision: int) -> float:
    """Round half away from zero on the shortest decimal form of ``value``.

    ``round_coordinate(0.00005, 4) == 0.0001`` and
    ``round_coordinate(-0.00005, 4) == -0.0001``, unlike the built-in
    ``round`` which works on the binary value and rounds half to even.
    Any integer precision is accepted; -1 rounds to tens.
    """
    exact = Decimal(repr(value))
    # Already no finer than the requested precision
    if not exact.is_finite() or exact.as_tuple().exponent >= -precision:
        return float(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + precision + 2)
        return float(exact.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP))


def deduplicate(records: Iterable[LocationRecord], precision: int) -> List[LocationRecord]:
    """Keep the first record of every rounded (latitude, longitude) pair.

    Output order is first-seen order. Kept records are new values whose
    coordinates are the rounded ones; altitude and timestamp are unchanged.
    """
    seen: Set[Tuple[float, float]] = set()
    unique: List[LocationRecord] = []
    for record in records:
        key = (round_coordinate(record.latitude, precision), round_coordinate(record.longitude, precision))
        if key in seen:
            continue
        seen.add(key)
        unique.append(replace(record, latitude=key[0], longitude=key[1]))
    return unique
