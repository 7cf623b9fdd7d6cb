"""Circuit and crossing data structures."""

from __future__ import annotations
from dataclasses import dataclass, field


class TopologyError(RuntimeError):
    """The traced circuit is inconsistent with the diagram it came from."""


@dataclass
class Crossing:
    crossing_id: int
    absolute_index: int          # grid cell where the strands cross
    row: int
    column: int
    over_edge: tuple[int, int]   # column edge (x → o), passes over
    under_edge: tuple[int, int]  # row edge (o → x), passes under


@dataclass
class Topology:
    resolution: int
    base_circuit: list[int]                      # 2n+1 entries, closed
    circuit: list[int]                           # with crossings spliced in
    lifted: set[int] = field(default_factory=set)
    crossings: list[Crossing] = field(default_factory=list)

    @property
    def num_crossings(self) -> int:
        return len(self.crossings)
