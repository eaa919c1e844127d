from __future__ import annotations
import math
import operator
from typing import Callable, Dict, Sequence

from ..errors import ArityError, InvalidTypeId
from bitspacket.models.common import TypeId

# Reductions over one or more operands
_FOLDS: Dict[int, Callable[[Sequence[int]], int]] = {
    TypeId.SUM: sum,
    TypeId.PRODUCT: math.prod,
    TypeId.MINIMUM: min,
    TypeId.MAXIMUM: max,
}

# Comparisons over exactly two operands, first decoded on the left
_COMPARISONS: Dict[int, Callable[[int, int], bool]] = {
    TypeId.GREATER_THAN: operator.gt,
    TypeId.LESS_THAN: operator.lt,
    TypeId.EQUAL_TO: operator.eq,
}

def apply_operator(type_id: int, operands: Sequence[int]) -> int:
    """Evaluate an operator packet from its children's values, in decode order."""
    fold = _FOLDS.get(type_id)
    if fold is not None:
        if not operands:
            raise ArityError(type_id, 0, "at least 1")
        return fold(operands)

    compare = _COMPARISONS.get(type_id)
    if compare is None:
        raise InvalidTypeId(type_id)
    if len(operands) != 2:
        raise ArityError(type_id, len(operands), "exactly 2")
    return int(compare(operands[0], operands[1]))
