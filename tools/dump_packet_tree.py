#!/usr/bin/env python3
from pathlib import Path
from bitspacket.binary.reader import load_bytes, parse_transmission
from bitspacket.models.packet import AnyPacket, LiteralPacket

def dump(root: AnyPacket):
    stack = [(root, 0)]
    while stack:
        pkt, indent = stack.pop()
        pad = "  " * indent
        span = f"[{pkt.start_bit:5d}..{pkt.end_bit:5d})"
        if isinstance(pkt, LiteralPacket):
            print(f"{span} {pad}v{pkt.version} literal {pkt.value}")
            continue
        print(f"{span} {pad}v{pkt.version} {pkt.type_id.name.lower()} "
              f"{pkt.length_type.name.lower()} children={len(pkt.children)} = {pkt.evaluate()}")
        stack.extend((child, indent + 1) for child in reversed(pkt.children))

def main(path: Path):
    t = parse_transmission(load_bytes(path))
    dump(t.root)
    print(f"version_sum={t.version_sum()} value={t.evaluate()} padding_bits={t.padding_bits}")

if __name__ == "__main__":
    import sys
    main(Path(sys.argv[1] if len(sys.argv) > 1 else "input.txt"))
