"""Mapping between external identifiers and dense array indices."""

from typing import Dict, Hashable, Iterable, Iterator, List

# Dense id returned for identifiers that were never observed
NOT_FOUND = -1


class IdentifierIndex:
    """Bidirectional mapping between external ids and contiguous indices.

    Dense ids start at 0 and are assigned in order of first appearance.
    The mapping is fixed once constructed.
    """

    __slots__ = ("_to_dense", "_to_sparse")

    def __init__(self, ids: Iterable[Hashable] = ()):
        to_dense: Dict[Hashable, int] = {}
        to_sparse: List[Hashable] = []
        for external_id in ids:
            if external_id not in to_dense:
                to_dense[external_id] = len(to_sparse)
                to_sparse.append(external_id)
        self._to_dense = to_dense
        self._to_sparse = tuple(to_sparse)

    def to_dense_id(self, external_id: Hashable) -> int:
        """Return the dense id of ``external_id`` or ``NOT_FOUND``."""
        try:
            return self._to_dense.get(external_id, NOT_FOUND)
        except TypeError:
            # unhashable ids cannot have been observed
            return NOT_FOUND

    def to_sparse_id(self, dense_id: int) -> Hashable:
        """Return the external id stored at ``dense_id``."""
        if dense_id < 0 or dense_id >= len(self._to_sparse):
            raise IndexError(
                f"Dense id {dense_id} out of bounds for index of size "
                f"{len(self._to_sparse)}"
            )
        return self._to_sparse[dense_id]

    def __len__(self) -> int:
        return len(self._to_sparse)

    def __contains__(self, external_id: object) -> bool:
        return self.to_dense_id(external_id) != NOT_FOUND

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._to_sparse)

    def __repr__(self) -> str:
        return f"IdentifierIndex(size={len(self)})"
