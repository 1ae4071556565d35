from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a sorted, filtered query."""

    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 0
    size: int = 10

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total + self.size - 1) // self.size
