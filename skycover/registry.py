"""Name-to-callable registry used for conditions and operations."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

F = TypeVar("F", bound=Callable)


@dataclass(frozen=True)
class Entry(Generic[F]):
    name: str
    fn: F
    help: str


class Registry(Generic[F]):
    def __init__(self, kind: str):
        self.kind = kind
        self._entries: dict[str, Entry[F]] = {}

    def register(self, name: str, fn: F, help: str) -> None:
        if name in self._entries:
            raise ValueError(f"duplicate {self.kind}: {name!r}")
        self._entries[name] = Entry(name=name, fn=fn, help=help)

    def get(self, name: str) -> F:
        try:
            return self._entries[name].fn
        except KeyError:
            raise KeyError(
                f"unknown {self.kind} {name!r}, expected one of: {', '.join(self.names())}"
            ) from None

    def __getitem__(self, name: str) -> F:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        return sorted(self._entries)

    def help(self) -> dict[str, str]:
        return {name: self._entries[name].help for name in self.names()}
