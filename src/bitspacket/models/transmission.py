from __future__ import annotations
from pydantic import BaseModel, Field
from .packet import AnyPacket

class Transmission(BaseModel):
    root: AnyPacket
    bit_length: int = Field(..., ge=0)

    @property
    def padding_bits(self) -> int:
        return self.bit_length - self.root.end_bit

    @classmethod
    def from_binary(cls, data: bytes, *, limits=None) -> "Transmission":
        from ..binary.reader import parse_transmission
        return parse_transmission(data, limits=limits)

    @classmethod
    def from_hex(cls, text: str, *, limits=None) -> "Transmission":
        from ..binary.reader import hex_to_bytes, parse_transmission
        return parse_transmission(hex_to_bytes(text), limits=limits)

    def version_sum(self) -> int:
        return self.root.version_sum()

    def evaluate(self) -> int:
        return self.root.evaluate()
