from __future__ import annotations
from typing import Dict, Iterator, List, Union
from pydantic import BaseModel, Field
from .common import TypeId, LengthType
from bitspacket.binary.codecs.operator_codec import apply_operator

class Packet(BaseModel):
    version: int = Field(..., ge=0, le=7)
    type_id: TypeId
    start_bit: int = Field(..., ge=0)
    end_bit: int = Field(..., ge=0)

    @property
    def bit_span(self) -> int:
        return self.end_bit - self.start_bit

    def walk(self) -> Iterator[Packet]:
        """Pre-order traversal: this packet, then each child's subtree."""
        stack: List[Packet] = [self]
        while stack:
            pkt = stack.pop()
            yield pkt
            if isinstance(pkt, OperatorPacket):
                stack.extend(reversed(pkt.children))

    def version_sum(self) -> int:
        return sum(p.version for p in self.walk())

class LiteralPacket(Packet):
    type_id: TypeId = TypeId.LITERAL
    value: int = Field(..., ge=0)

    def evaluate(self) -> int:
        return self.value

class OperatorPacket(Packet):
    length_type: LengthType
    children: List[AnyPacket] = Field(default_factory=list)

    def evaluate(self) -> int:
        # reversed pre-order reaches every child before its parent
        values: Dict[int, int] = {}
        for pkt in reversed(list(self.walk())):
            if isinstance(pkt, LiteralPacket):
                values[id(pkt)] = pkt.value
            else:
                operands = [values.pop(id(c)) for c in pkt.children]
                values[id(pkt)] = apply_operator(pkt.type_id, operands)
        return values[id(self)]

AnyPacket = Union[LiteralPacket, OperatorPacket]

OperatorPacket.model_rebuild()
