"""Per-frame data association between the local and the global map.

Keys are local-map indices (stable for the frame that produced them),
values are global-map indices.
"""

from typing import Dict, ItemsView, Iterator, Optional


class AssociationTable:
    """Mapping local object index -> matched global object index.

    Rebuilt every frame. Recording a second global index for the same local
    index overwrites the first one (last writer wins), so each local object
    ends up with at most one match while a global object may end up with
    none.
    """

    def __init__(self):
        self._table: Dict[int, int] = {}

    def record(self, local_index: int, global_index: int):
        self._table[local_index] = global_index

    def get(self, local_index: int) -> Optional[int]:
        """Global index matched to a local object, or None."""
        return self._table.get(local_index)

    def clear(self):
        self._table.clear()

    def items(self) -> ItemsView[int, int]:
        return self._table.items()

    def global_indices(self) -> set:
        """Global objects that at least one local object points to."""
        return set(self._table.values())

    def __contains__(self, local_index: int) -> bool:
        return local_index in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[int]:
        return iter(self._table)

    def __repr__(self) -> str:
        return f"AssociationTable({self._table})"
