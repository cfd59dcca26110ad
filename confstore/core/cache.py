# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Section cache for config stores.

Maps section -> key -> last known value. Both levels compare names
case-insensitively, like the Windows profile and registry APIs.
The cache is not thread-safe on its own; stores guard it with their lock.
"""

from collections.abc import Mapping, MutableMapping
from typing import Dict, Iterable, Iterator, Optional, Set, Tuple, Union


class _Missing:
    """Sentinel type for an absent cache entry."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


def _fold(name: str) -> str:
    return name.casefold()


class CaseInsensitiveDict(MutableMapping):
    """
    Mutable mapping with case-insensitive string keys.

    The first spelling stored for a key is kept and returned on iteration.
    """

    def __init__(self, data=None, **kwargs):
        self._store: Dict[str, Tuple[str, str]] = {}
        if data is None:
            data = {}
        self.update(data, **kwargs)

    def __setitem__(self, key: str, value: str):
        folded = _fold(key)
        existing = self._store.get(folded)
        original = existing[0] if existing is not None else key
        self._store[folded] = (original, value)

    def __getitem__(self, key: str) -> str:
        return self._store[_fold(key)][1]

    def __delitem__(self, key: str):
        del self._store[_fold(key)]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key) -> bool:
        return isinstance(key, str) and _fold(key) in self._store

    def copy(self) -> "CaseInsensitiveDict":
        return CaseInsensitiveDict(self._store.values())

    def __repr__(self):
        return f"{self.__class__.__name__}({dict(self.items())!r})"


class SectionView(Mapping):
    """Read-only, case-insensitive snapshot of one section."""

    def __init__(self, data: Union[Mapping, None] = None):
        self._data = CaseInsensitiveDict(data or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key) -> bool:
        return key in self._data

    def __repr__(self):
        return f"{self.__class__.__name__}({dict(self.items())!r})"


class SectionCache:
    """
    In-memory cache of section values.

    Populated lazily by reads and invalidated by writes. Holds no
    persistent state; a new store always starts with an empty cache.

    A section is "complete" once every key the backing store listed for
    it has been cached; only complete sections may answer a whole-section
    read. Adding or removing a single key drops the mark again.
    """

    def __init__(self):
        self._sections: Dict[str, CaseInsensitiveDict] = {}
        self._complete: Set[str] = set()

    def save(self, section: str, key: str, value: str):
        """
        Insert or overwrite a single entry.

        Args:
            section: Section name
            key: Key name within the section
            value: Value to remember
        """
        folded = _fold(section)
        entries = self._sections.get(folded)
        if entries is None:
            entries = CaseInsensitiveDict()
            self._sections[folded] = entries
        if key not in entries:
            self._complete.discard(folded)
        entries[key] = value

    def load(self, section: str, key: str) -> Union[str, _Missing]:
        """
        Get a cached value.

        Returns:
            The cached value, or MISSING when nothing is cached
        """
        entries = self._sections.get(_fold(section))
        if entries is None or key not in entries:
            return MISSING
        return entries[key]

    def delete(self, section: str, key: Optional[str] = None) -> bool:
        """
        Remove one entry, or the whole section when key is None.

        Returns:
            True if something was removed
        """
        folded = _fold(section)
        self._complete.discard(folded)

        if key is None:
            return self._sections.pop(folded, None) is not None

        entries = self._sections.get(folded)
        if entries is not None and key in entries:
            del entries[key]
            return True
        return False

    def mark_complete(self, section: str, keys: Iterable[str]):
        """
        Record that ``keys`` is the full key set of a section.

        Cached entries outside that set (defaults remembered for absent
        keys) are dropped.
        """
        folded = _fold(section)
        listed = CaseInsensitiveDict((key, "") for key in keys)
        entries = self._sections.setdefault(folded, CaseInsensitiveDict())
        for key in [key for key in entries if key not in listed]:
            del entries[key]
        self._complete.add(folded)

    def is_complete(self, section: str) -> bool:
        return _fold(section) in self._complete

    def section(self, section: str) -> Optional[CaseInsensitiveDict]:
        """Get the live mapping for a section, or None"""
        return self._sections.get(_fold(section))

    def clear(self):
        """Clear all cache entries"""
        self._sections.clear()
        self._complete.clear()

    def size(self) -> int:
        """Total number of cached entries"""
        return sum(len(entries) for entries in self._sections.values())

    def __contains__(self, section) -> bool:
        return isinstance(section, str) and _fold(section) in self._sections
