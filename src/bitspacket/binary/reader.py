from __future__ import annotations

import binascii
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, Union

from .codecs.bitcursor import Cursor
from .codecs.operator_codec import apply_operator
from .codecs.packet_header import decode_operator_header, decode_packet_header
from .errors import LengthOverrun, MaxDepthExceeded
from bitspacket.config import DecodeLimits, get_decode_limits
from bitspacket.models.common import LengthType, TypeId
from bitspacket.models.packet import AnyPacket, LiteralPacket, OperatorPacket
from bitspacket.models.transmission import Transmission

logger = logging.getLogger(__name__)

BytesLike = Union[str, Path, bytes, bytearray, memoryview]


class HexFormatError(ValueError):
    pass


# -----------------------------
# Input boundary
# -----------------------------

def hex_to_bytes(text: str) -> bytes:
    """Decode a transmission written as pairs of hex digits: "1A2B" -> b"\\x1a\\x2b"."""
    digits = text.strip()
    if len(digits) % 2:
        raise HexFormatError(f"odd number of hex digits ({len(digits)})")
    try:
        return binascii.unhexlify(digits)
    except ValueError as e:
        raise HexFormatError(f"not a hex string: {e}") from e


def load_bytes(inp: BytesLike) -> bytes:
    """
    Bytes-like input is used as-is. A path is read as text and its first
    non-blank line is decoded as hex.
    """
    if isinstance(inp, (bytes, bytearray, memoryview)):
        return bytes(inp)
    try:
        text = Path(str(inp)).read_text(encoding="ascii")
    except UnicodeDecodeError as e:
        raise HexFormatError(f"non-ASCII byte in {inp} at offset {e.start}") from e
    for line in text.splitlines():
        if line.strip():
            return hex_to_bytes(line)
    raise HexFormatError(f"no transmission found in {inp}")


# -----------------------------
# Descent
# -----------------------------

@dataclass
class _Frame:
    """An operator packet whose children are still being decoded."""
    version: int
    type_id: int
    start: int
    length_type: LengthType
    length: int
    children_start: int
    # Nearest enclosing bit-length boundary, this frame's own included
    bound: Optional[int] = None
    operands: List[Any] = field(default_factory=list)

    def enclose(self, outer: Optional[int]) -> None:
        if self.length_type is LengthType.TOTAL_BITS:
            own = self.children_start + self.length
            self.bound = own if outer is None else min(own, outer)
        else:
            self.bound = outer

    def check_bounds(self, pos: int) -> None:
        if self.bound is not None and pos > self.bound:
            raise LengthOverrun(self.bound, pos)

    def complete(self, pos: int) -> bool:
        if self.length_type is LengthType.TOTAL_BITS:
            return pos == self.children_start + self.length
        return len(self.operands) == self.length


# on_literal(version, value, start, end) / on_operator(frame, end)
LiteralFn = Callable[[int, int, int, int], Any]
OperatorFn = Callable[[_Frame, int], Any]


def _descend(cur: Cursor, on_literal: LiteralFn, on_operator: OperatorFn, limits: DecodeLimits):
    """
    Decode one packet at the cursor, children included, and reduce it.

    Open operators are kept on an explicit stack rather than the Python call
    stack, so input nesting is bounded only by ``limits.max_depth``. Each
    finished packet's result is appended to its parent's operands; the parent
    is reduced, and its operands dropped, as soon as its last child ends.
    """
    stack: List[_Frame] = []
    while True:
        if len(stack) >= limits.max_depth:
            raise MaxDepthExceeded(limits.max_depth, cur.tell())

        start = cur.tell()
        version, type_id = decode_packet_header(cur)
        if type_id == TypeId.LITERAL:
            value = cur.read_literal_value()
            result = on_literal(version, value, start, cur.tell())
        else:
            length_type, length = decode_operator_header(cur)
            frame = _Frame(version, type_id, start, length_type, length, cur.tell())
            frame.enclose(stack[-1].bound if stack else None)
            if not frame.complete(cur.tell()):
                stack.append(frame)
                continue
            result = on_operator(frame, cur.tell())

        # Hand the finished packet to its parent; close every parent it completes.
        while stack:
            parent = stack[-1]
            parent.check_bounds(cur.tell())
            parent.operands.append(result)
            if not parent.complete(cur.tell()):
                break
            stack.pop()
            result = on_operator(parent, cur.tell())
        else:
            return result


def _decode_root(data: bytes, on_literal: LiteralFn, on_operator: OperatorFn, limits: Optional[DecodeLimits]):
    cur = Cursor(data)
    result = _descend(cur, on_literal, on_operator, limits or get_decode_limits())
    logger.debug(
        "root packet spans bits 0..%d; ignoring %d trailing bits", cur.tell(), cur.remaining()
    )
    return result


# -----------------------------
# Reductions
# -----------------------------

def _literal_version(version: int, value: int, start: int, end: int) -> int:
    return version

def _operator_version(frame: _Frame, end: int) -> int:
    return frame.version + sum(frame.operands)

def _literal_value(version: int, value: int, start: int, end: int) -> int:
    return value

def _operator_value(frame: _Frame, end: int) -> int:
    return apply_operator(frame.type_id, frame.operands)

def _literal_node(version: int, value: int, start: int, end: int) -> LiteralPacket:
    return LiteralPacket(version=version, value=value, start_bit=start, end_bit=end)

def _operator_node(frame: _Frame, end: int) -> OperatorPacket:
    return OperatorPacket(
        version=frame.version,
        type_id=TypeId(frame.type_id),
        length_type=frame.length_type,
        start_bit=frame.start,
        end_bit=end,
        children=frame.operands,
    )

# (packets, literals, depth)
def _literal_summary(version: int, value: int, start: int, end: int) -> Tuple[int, int, int]:
    return 1, 1, 1

def _operator_summary(frame: _Frame, end: int) -> Tuple[int, int, int]:
    packets = 1 + sum(p for p, _, _ in frame.operands)
    literals = sum(l for _, l, _ in frame.operands)
    depth = 1 + max((d for _, _, d in frame.operands), default=0)
    return packets, literals, depth


# -----------------------------
# Public entry points
# -----------------------------

def decode_version_sum(data: bytes, *, limits: Optional[DecodeLimits] = None) -> int:
    """Sum of the version fields of the root packet and all its descendants."""
    return _decode_root(data, _literal_version, _operator_version, limits)


def decode_evaluate(data: bytes, *, limits: Optional[DecodeLimits] = None) -> int:
    """Arithmetic value of the root packet."""
    return _decode_root(data, _literal_value, _operator_value, limits)


def parse_packet(data: bytes, *, limits: Optional[DecodeLimits] = None) -> AnyPacket:
    """Decode the root packet into a tree of packet models."""
    return _decode_root(data, _literal_node, _operator_node, limits)


def parse_transmission(data: bytes, *, limits: Optional[DecodeLimits] = None) -> Transmission:
    return Transmission(root=parse_packet(data, limits=limits), bit_length=8 * len(data))


def summarize_transmission(
    data: bytes, *, limits: Optional[DecodeLimits] = None
) -> Tuple[int, int, int]:
    """
    Returns (packets, literals, depth) without building the packet tree.
    """
    return _decode_root(data, _literal_summary, _operator_summary, limits)
