"""Ordered collection of semantic objects."""

from typing import Iterator, List

from .object import SemanticObject


class SemanticMap:
    """Objects in discovery order.

    The mapper owns two of these: the global map, which only grows or has
    its objects merged in place, and the local map, which is cleared at the
    start of every frame.
    """

    def __init__(self):
        self._objects: List[SemanticObject] = []

    def add_object(self, obj: SemanticObject) -> int:
        """Append an object.

        Returns:
            Index of the new object
        """
        self._objects.append(obj)
        return len(self._objects) - 1

    def clear(self):
        self._objects.clear()

    def __len__(self) -> int:
        return len(self._objects)

    def __getitem__(self, index: int) -> SemanticObject:
        return self._objects[index]

    def __iter__(self) -> Iterator[SemanticObject]:
        return iter(self._objects)

    def labels(self) -> List[str]:
        """Label of every object, in map order."""
        return [obj.label for obj in self._objects]

    def objects_by_label(self, label: str) -> List[SemanticObject]:
        return [obj for obj in self._objects if obj.label == label]

    def total_points(self) -> int:
        return sum(obj.num_points for obj in self._objects)

    def __repr__(self) -> str:
        return f"SemanticMap(size={len(self)}, points={self.total_points()})"
