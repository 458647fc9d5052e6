"""Per-suite case registry implementation."""
from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple, Union

from microut.core.models import CaseBody, CaseDescriptor


class CaseRegistry:
    """Stores case descriptors in declaration order, one entry per body."""

    def __init__(self) -> None:
        self._descriptors: List[CaseDescriptor] = []

    def register(self, descriptor: CaseDescriptor) -> CaseDescriptor:
        """Add ``descriptor`` unless its body is already registered.

        Returns the descriptor that is stored for that body.
        """

        for existing in self._descriptors:
            if existing.same_case(descriptor):
                return existing
        self._descriptors.append(descriptor)
        return descriptor

    def all(self) -> Tuple[CaseDescriptor, ...]:
        return tuple(self._descriptors)

    def get(self, name: str) -> CaseDescriptor:
        for descriptor in self._descriptors:
            if descriptor.name == name:
                return descriptor
        raise KeyError(f"Case '{name}' is not registered")

    def names(self) -> Iterable[str]:
        return tuple(descriptor.name for descriptor in self._descriptors)

    def __contains__(self, item: Union[CaseDescriptor, CaseBody]) -> bool:
        body = item.identity if isinstance(item, CaseDescriptor) else item
        return any(descriptor.identity is body for descriptor in self._descriptors)

    def __iter__(self) -> Iterator[CaseDescriptor]:
        return iter(tuple(self._descriptors))

    def __len__(self) -> int:
        return len(self._descriptors)
