"""A string-to-string hash table with separate chaining and djb2 hashing."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

_HASH_SEED = 5381
_MASK = (1 << 64) - 1


def hash_function(key: str, size: int) -> int:
    """Return the djb2 bucket index of ``key`` for a table of ``size`` buckets."""
    if size < 1:
        raise ValueError("hash table size must be positive")
    value = _HASH_SEED
    for byte in key.encode("utf-8"):
        # Bytes above 0x7f count as signed chars.
        char = byte - 256 if byte >= 128 else byte
        value = (((value << 5) + value) + char) & _MASK
    return value % size


class HashTable:
    """Fixed-size table of buckets, each holding ``[key, value]`` pairs in order."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("hash table size must be positive")
        self.size = size
        self._buckets: list[list[list[str]]] = [[] for _ in range(size)]
        self._count = 0

    def _bucket(self, key: str) -> list[list[str]]:
        return self._buckets[hash_function(key, self.size)]

    def insert(self, key: str, value: str) -> None:
        """Set ``key`` to ``value``; an existing entry keeps its place in its bucket."""
        bucket = self._bucket(key)
        for entry in bucket:
            if entry[0] == key:
                entry[1] = value
                return
        bucket.append([key, value])
        self._count += 1

    def search(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None."""
        for entry_key, entry_value in self._bucket(key):
            if entry_key == key:
                return entry_value
        return None

    def contains(self, key: str) -> bool:
        """Tell whether ``key`` is in the table."""
        return any(entry[0] == key for entry in self._bucket(key))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def delete(self, key: str) -> None:
        """Remove ``key`` if present; a missing key is ignored."""
        bucket = self._bucket(key)
        for position, entry in enumerate(bucket):
            if entry[0] == key:
                del bucket[position]
                self._count -= 1
                return

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield ``(key, value)`` pairs in bucket order."""
        for bucket in self._buckets:
            for key, value in bucket:
                yield key, value

    def to_array(self) -> list[str]:
        """Return every entry as a ``KEY=VALUE`` string, in bucket order."""
        return [f"{key}={value}" for key, value in self.items()]

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[str]:
        for key, _ in self.items():
            yield key

    def __repr__(self) -> str:
        return f"HashTable(size={self.size}, count={self._count})"


def find_key(text: str) -> str:
    """Return the part of ``KEY=VALUE`` before the first ``=``."""
    key, sep, _ = text.partition("=")
    if not sep:
        raise ValueError(f"no '=' in {text!r}")
    return key


def find_value(text: str) -> str:
    """Return the part of ``KEY=VALUE`` after the first ``=``."""
    _, sep, value = text.partition("=")
    if not sep:
        raise ValueError(f"no '=' in {text!r}")
    return value


def env_to_hashtable(env: Iterable[str]) -> HashTable:
    """Build a table from ``KEY=VALUE`` strings, sized twice their number."""
    entries = list(env)
    table = HashTable(max(len(entries) * 2, 1))
    for entry in entries:
        table.insert(find_key(entry), find_value(entry))
    return table