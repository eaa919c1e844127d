import pytest

from bitspacket.binary.errors import ArityError, EndOfStream, LengthOverrun, MaxDepthExceeded
from bitspacket.binary.reader import (
    HexFormatError,
    decode_evaluate,
    decode_version_sum,
    hex_to_bytes,
    load_bytes,
    parse_packet,
    parse_transmission,
    summarize_transmission,
)
from bitspacket.config import DEFAULT_MAX_DEPTH, MAX_DEPTH_CEILING, DecodeLimits
from bitspacket.models.common import LengthType, TypeId
from bitspacket.models.packet import LiteralPacket, OperatorPacket

from bitstrings import by_count, by_length, literal, nested, to_bytes

VERSION_SUMS = [
    ("D2FE28", 6),
    ("38006F45291200", 9),
    ("EE00D40C823060", 14),
    ("8A004A801A8002F478", 16),
    ("620080001611562C8802118E34", 12),
    ("C0015000016115A2E0802F182340", 23),
    ("A0016C880162017C3686B18A3D4780", 31),
]

VALUES = [
    ("C200B40A82", 3),
    ("04005AC33890", 54),
    ("880086C3E88112", 7),
    ("CE00C43D881120", 9),
    ("D8005AC2A8F0", 1),
    ("F600BC2D8F", 0),
    ("9C005AC2F8F0", 0),
    ("9C0141080250320F1802104A08", 1),
]


@pytest.mark.parametrize("hexstr, expected", VERSION_SUMS)
def test_version_sum(hexstr, expected):
    assert decode_version_sum(bytes.fromhex(hexstr)) == expected


@pytest.mark.parametrize("hexstr, expected", VALUES)
def test_evaluate(hexstr, expected):
    assert decode_evaluate(bytes.fromhex(hexstr)) == expected


@pytest.mark.parametrize("hexstr, _", VERSION_SUMS + VALUES)
def test_tree_agrees_with_single_pass(hexstr, _):
    data = bytes.fromhex(hexstr)
    root = parse_packet(data)
    assert root.version_sum() == decode_version_sum(data)
    if hexstr in dict(VALUES):
        assert root.evaluate() == decode_evaluate(data)


def test_literal_packet():
    root = parse_packet(bytes.fromhex("D2FE28"))
    assert isinstance(root, LiteralPacket)
    assert (root.version, root.value) == (6, 2021)
    assert (root.start_bit, root.end_bit) == (0, 21)


def test_operator_by_total_bits():
    root = parse_packet(bytes.fromhex("38006F45291200"))
    assert isinstance(root, OperatorPacket)
    assert root.type_id is TypeId.LESS_THAN
    assert root.length_type is LengthType.TOTAL_BITS
    assert [c.value for c in root.children] == [10, 20]
    assert root.end_bit == 22 + 27


def test_operator_by_subpacket_count():
    root = parse_packet(bytes.fromhex("EE00D40C823060"))
    assert root.length_type is LengthType.SUBPACKET_COUNT
    assert [c.value for c in root.children] == [1, 2, 3]
    assert [c.version for c in root.children] == [2, 4, 1]
    assert decode_evaluate(bytes.fromhex("EE00D40C823060")) == 3


def test_trailing_padding_ignored():
    data = bytes.fromhex("D2FE28") + b"\xff\xff"
    assert decode_version_sum(data) == 6
    assert decode_evaluate(data) == 2021
    assert parse_transmission(data).padding_bits == 3 + 16


def test_root_ending_on_last_bit():
    bits = literal(3, 0x15)
    assert len(bits) == 16
    data = to_bytes(bits)
    assert parse_transmission(data).padding_bits == 0
    assert decode_evaluate(data) == 0x15
    assert decode_version_sum(data) == 3


@pytest.mark.parametrize("data", [b"", b"\x00", bytes.fromhex("D2FE")])
def test_truncated_input(data):
    with pytest.raises(EndOfStream):
        decode_version_sum(data)
    with pytest.raises(EndOfStream):
        decode_evaluate(data)


def test_missing_counted_children():
    bits = by_count(1, 0, literal(0, 1), literal(0, 2))
    # declare three children, supply two
    bits = bits[:7] + f"{3:011b}" + bits[18:]
    with pytest.raises(EndOfStream):
        decode_evaluate(to_bytes(bits))


def test_child_overruns_total_length():
    good = by_length(1, 6, literal(6, 10), literal(2, 20))
    assert to_bytes(good) == bytes.fromhex("38006F45291200")
    bad = by_length(1, 6, literal(6, 10), literal(2, 20), length=20)
    with pytest.raises(LengthOverrun) as ei:
        decode_version_sum(to_bytes(bad))
    assert ei.value.end == 22 + 20
    assert ei.value.position == 22 + 27


def test_comparison_operand_order():
    a, b = literal(0, 5), literal(0, 15)
    for type_id in (TypeId.GREATER_THAN, TypeId.LESS_THAN):
        ab = decode_evaluate(to_bytes(by_count(0, type_id, a, b)))
        ba = decode_evaluate(to_bytes(by_count(0, type_id, b, a)))
        assert {ab, ba} == {0, 1}
    ab = decode_evaluate(to_bytes(by_count(0, TypeId.EQUAL_TO, a, b)))
    ba = decode_evaluate(to_bytes(by_count(0, TypeId.EQUAL_TO, b, a)))
    assert ab == ba == 0


def test_operator_without_children():
    data = to_bytes(by_count(5, TypeId.SUM))
    assert decode_version_sum(data) == 5
    with pytest.raises(ArityError):
        decode_evaluate(data)
    data = to_bytes(by_length(3, TypeId.MAXIMUM))
    assert decode_version_sum(data) == 3
    with pytest.raises(ArityError):
        decode_evaluate(data)


def test_comparison_with_three_operands():
    data = to_bytes(by_count(0, TypeId.EQUAL_TO, literal(0, 1), literal(0, 1), literal(0, 1)))
    assert decode_version_sum(data) == 0
    with pytest.raises(ArityError):
        decode_evaluate(data)


def test_large_literals_and_products():
    data = to_bytes(by_count(0, TypeId.PRODUCT, literal(0, 2**63), literal(0, 2**63)))
    assert decode_evaluate(data) == 2**126


def test_mixed_length_schemes():
    inner = by_length(1, TypeId.SUM, literal(2, 3), literal(3, 4))
    outer = by_count(4, TypeId.MAXIMUM, inner, literal(5, 6), by_count(6, TypeId.MINIMUM, literal(7, 9)))
    data = to_bytes(outer)
    assert decode_evaluate(data) == 9
    assert decode_version_sum(data) == 4 + 1 + 2 + 3 + 5 + 6 + 7


def test_max_depth():
    data = to_bytes(nested(3, value=42))
    assert decode_evaluate(data, limits=DecodeLimits(max_depth=3)) == 42
    with pytest.raises(MaxDepthExceeded):
        decode_evaluate(data, limits=DecodeLimits(max_depth=2))


def test_deep_nesting_within_default_limit(monkeypatch):
    monkeypatch.delenv("BITS_MAX_DEPTH", raising=False)
    data = to_bytes(nested(DEFAULT_MAX_DEPTH, value=7))
    assert decode_evaluate(data) == 7
    assert summarize_transmission(data) == (DEFAULT_MAX_DEPTH, 1, DEFAULT_MAX_DEPTH)


def test_default_limit_rejects_deeper_nesting(monkeypatch):
    monkeypatch.delenv("BITS_MAX_DEPTH", raising=False)
    with pytest.raises(MaxDepthExceeded):
        decode_version_sum(to_bytes(nested(DEFAULT_MAX_DEPTH + 1)))


def test_max_depth_from_environment(monkeypatch):
    monkeypatch.setenv("BITS_MAX_DEPTH", "2")
    with pytest.raises(MaxDepthExceeded):
        decode_version_sum(to_bytes(nested(3)))


def test_summary():
    assert summarize_transmission(bytes.fromhex("D2FE28")) == (1, 1, 1)
    assert summarize_transmission(bytes.fromhex("EE00D40C823060")) == (4, 3, 2)
    assert summarize_transmission(bytes.fromhex("9C0141080250320F1802104A08")) == (7, 4, 3)


def test_hex_to_bytes():
    assert hex_to_bytes("1A2B") == b"\x1a\x2b"
    assert hex_to_bytes("d2fe28\n") == b"\xd2\xfe\x28"


@pytest.mark.parametrize("text", ["ABC", "ZZ", "12 34"])
def test_hex_to_bytes_rejects(text):
    with pytest.raises(HexFormatError):
        hex_to_bytes(text)


def test_load_bytes(tmp_path):
    p = tmp_path / "input.txt"
    p.write_text("\n  C200B40A82\nFFFF\n")
    assert load_bytes(p) == bytes.fromhex("C200B40A82")
    assert load_bytes(str(p)) == bytes.fromhex("C200B40A82")
    assert load_bytes(b"\x01") == b"\x01"


def test_load_bytes_empty_file(tmp_path):
    p = tmp_path / "input.txt"
    p.write_text("\n\n")
    with pytest.raises(HexFormatError):
        load_bytes(p)


def test_tree_at_depth_ceiling():
    limits = DecodeLimits(max_depth=MAX_DEPTH_CEILING)
    t = parse_transmission(to_bytes(nested(MAX_DEPTH_CEILING, value=9)), limits=limits)
    assert t.evaluate() == 9
    assert t.version_sum() == 0
    assert len(list(t.root.walk())) == MAX_DEPTH_CEILING
    with pytest.raises(MaxDepthExceeded):
        parse_transmission(to_bytes(nested(MAX_DEPTH_CEILING + 1)), limits=limits)


def test_overrun_of_outer_length_caught_inside_counted_child():
    # counted child declares two literals, but the outer length ends mid-way
    # through the first and the second is never sent
    inner = "000000" "1" f"{2:011b}" + literal(0, 1)
    data = to_bytes(by_length(0, TypeId.SUM, inner, length=20))
    with pytest.raises(LengthOverrun) as ei:
        decode_evaluate(data)
    assert ei.value.end == 22 + 20
    assert ei.value.position == 22 + 18 + 11


def test_overrun_of_outer_length_through_nested_lengths():
    inner = by_length(0, TypeId.SUM, literal(0, 1), literal(0, 2))
    data = to_bytes(by_length(0, TypeId.SUM, inner, length=30))
    with pytest.raises(LengthOverrun) as ei:
        decode_version_sum(data)
    assert ei.value.end == 22 + 30
    assert ei.value.position == 22 + 22 + 11


@pytest.mark.parametrize("text", ["é1", "D2FEé2"])
def test_hex_to_bytes_rejects_non_ascii(text):
    with pytest.raises(HexFormatError):
        hex_to_bytes(text)


def test_load_bytes_rejects_non_ascii_file(tmp_path):
    p = tmp_path / "input.txt"
    p.write_bytes(b"D2FE\xe928\n")
    with pytest.raises(HexFormatError) as ei:
        load_bytes(p)
    assert "offset 4" in str(ei.value)
