from __future__ import annotations
from enum import IntEnum

class TypeId(IntEnum):
    SUM = 0
    PRODUCT = 1
    MINIMUM = 2
    MAXIMUM = 3
    LITERAL = 4
    GREATER_THAN = 5
    LESS_THAN = 6
    EQUAL_TO = 7

class LengthType(IntEnum):
    TOTAL_BITS = 0       # 15-bit total length of the children
    SUBPACKET_COUNT = 1  # 11-bit number of children
