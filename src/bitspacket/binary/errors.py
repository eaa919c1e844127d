from __future__ import annotations


class DecodeError(ValueError):
    """Base class for anything that makes a buffer an invalid packet stream."""


class InvalidBitCount(DecodeError):
    def __init__(self, count: int):
        super().__init__(f"cannot read {count} bits at once (1..16)")
        self.count = count


class EndOfStream(DecodeError):
    def __init__(self, position: int, requested: int, available: int):
        super().__init__(
            f"end of stream: need {requested} bits at bit {position}, {available} left"
        )
        self.position = position
        self.requested = requested
        self.available = available


class InvalidTypeId(DecodeError):
    def __init__(self, type_id: int):
        super().__init__(f"invalid packet type id {type_id}")
        self.type_id = type_id


class LengthOverrun(DecodeError):
    def __init__(self, end: int, position: int):
        super().__init__(
            f"sub-packet ended at bit {position}, past its parent's boundary at bit {end}"
        )
        self.end = end
        self.position = position


class ArityError(DecodeError):
    def __init__(self, type_id: int, count: int, expected: str):
        super().__init__(f"type {type_id} needs {expected} operands, got {count}")
        self.type_id = type_id
        self.count = count


class MaxDepthExceeded(DecodeError):
    def __init__(self, max_depth: int, position: int):
        super().__init__(f"packet nesting deeper than {max_depth} at bit {position}")
        self.max_depth = max_depth
        self.position = position
