# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Storage driver interface.

A driver performs the physical read/write of values and sections against
one medium. Drivers hold no cache and no lock; ``ConfigStore`` owns both.
Paths given to the probe primitives are in the driver's own notation
(filesystem path or hive-relative key path).
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class StorageDriver(ABC):
    """Narrow interface the config store core calls through."""

    #: Human readable location, used in log and error messages
    location: str = ""

    # -------------------------------------------------------------------------
    # Values and sections
    # -------------------------------------------------------------------------

    @abstractmethod
    def get(self, section: str, key: str, default: str) -> Optional[str]:
        """
        Read one value.

        Returns:
            The stored value, ``default`` if the key is absent, or None
            if the section itself cannot be opened
        """

    @abstractmethod
    def set(self, section: str, key: str, value: str) -> None:
        """Persist one value, creating the section if needed."""

    @abstractmethod
    def enumerate(self, section: str) -> List[str]:
        """
        List key names of a section.

        Raises:
            SectionNotFoundError: section does not exist
        """

    @abstractmethod
    def ensure_writable(self, section: str) -> None:
        """Create intermediate containers needed to write into section."""

    @abstractmethod
    def location_exists(self) -> bool:
        """Whether the store's own location exists."""

    # -------------------------------------------------------------------------
    # Existence and permission probe primitives
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def root_path(self) -> str:
        """Store location in the notation accepted by the probe primitives."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Whether path exists. Must not raise for a well-formed path."""

    @abstractmethod
    def parent_of(self, path: str) -> Optional[str]:
        """Parent container of path, or None when it cannot be derived."""

    @abstractmethod
    def container_of(self, path: str) -> str:
        """Container that receives the transient write probe for path."""

    @abstractmethod
    def make_container(self, container: str) -> None:
        """Create container if missing. Idempotent."""

    @abstractmethod
    def probe_container(self, container: str, prefix: str) -> None:
        """Create and delete a uniquely named entry directly under container."""

    @abstractmethod
    def open_target(self, path: str, read: bool, write: bool) -> None:
        """Open an existing target with exactly the requested access and release it."""

    def probe_placeholder(self, path: str) -> None:
        """
        Create a minimal entry at a missing path and delete it again.

        Only reached for a write check on a missing target whose container is
        not the target itself. Drivers where ``container_of(path) == path``
        never get here, because the container is created first.
        """
        raise NotImplementedError(f"{type(self).__name__} has no placeholder probe")
