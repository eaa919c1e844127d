from __future__ import annotations
from collections import Counter
from .models.common import TypeId
from .models.transmission import Transmission

def type_counts(transmission: Transmission) -> dict[TypeId, int]:
    counts = Counter(p.type_id for p in transmission.root.walk())
    return {t: counts.get(t, 0) for t in TypeId}

def plot_type_counts(transmission: Transmission):
    """Minimal bar chart of packets per type for sanity-checking."""
    import matplotlib.pyplot as plt
    counts = type_counts(transmission)
    plt.figure()
    plt.bar([t.name.lower() for t in counts], list(counts.values()))
    plt.xlabel("Packet type")
    plt.ylabel("Packets")
    plt.title(f"BITS packets (version sum {transmission.version_sum()})")
    plt.show()
