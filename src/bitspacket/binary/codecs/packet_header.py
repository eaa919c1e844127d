from __future__ import annotations
from .bitcursor import Cursor
from bitspacket.models.common import LengthType

VERSION_BITS = 3
TYPE_ID_BITS = 3
LENGTH_TYPE_BITS = 1
TOTAL_LENGTH_BITS = 15
SUBPACKET_COUNT_BITS = 11

def decode_packet_header(cur: Cursor) -> tuple[int, int]:
    """
    6-bit header shared by every packet: version (3 bits), type id (3 bits).
    Returns (version, type_id).
    """
    version = cur.read_bits(VERSION_BITS)
    type_id = cur.read_bits(TYPE_ID_BITS)
    return version, type_id

def decode_operator_header(cur: Cursor) -> tuple[LengthType, int]:
    """
    Length header that follows an operator's packet header.
    Returns (length_type, n): n is a bit count for TOTAL_BITS and a
    packet count for SUBPACKET_COUNT.
    """
    length_type = LengthType(cur.read_bits(LENGTH_TYPE_BITS))
    if length_type is LengthType.TOTAL_BITS:
        return length_type, cur.read_bits(TOTAL_LENGTH_BITS)
    return length_type, cur.read_bits(SUBPACKET_COUNT_BITS)
