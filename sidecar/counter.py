from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering
from typing import Generic, Hashable, Iterable, TypeVar

from .post import Post

K = TypeVar("K", bound=Hashable)


@total_ordering
@dataclass(frozen=True)
class TagCount:
    """A tag and its frequency; sorts by count descending, then tag ascending."""

    tag: str
    count: int

    def sort_key(self) -> tuple[int, str]:
        return (-self.count, self.tag)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TagCount):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return f"{self.tag}: {self.count}"


@dataclass
class TagCounter(Generic[K]):
    _counts: dict[K, int] = field(default_factory=dict)

    def increment(self, key: K) -> None:
        self._counts[key] = self._counts.get(key, 0) + 1

    def update(self, keys: Iterable[K]) -> None:
        for key in keys:
            self.increment(key)

    def get(self, key: K) -> int | None:
        return self._counts.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __len__(self) -> int:
        return len(self._counts)

    def into_sorted_table(self) -> list[TagCount]:
        return sorted(TagCount(tag=str(k), count=int(v)) for k, v in self._counts.items())


def count_tags(posts: Iterable[Post]) -> list[TagCount]:
    counter: TagCounter[str] = TagCounter()
    for post in posts:
        counter.update(post.tags)
    return counter.into_sorted_table()
