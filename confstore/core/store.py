# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Config Store - section/key/value access over a storage driver

Every public operation holds the store's lock for its whole duration,
driver calls included, so operations on one instance are strictly
serialized. Separate instances share neither cache nor lock.

Cache discipline:
- read_value: cache hit returns without a driver call; a miss is fetched
  and cached (the caller's default is cached for absent keys)
- write_value: drops the single (section, key) entry after a successful write
- read_section: served from cache only once the section was fully enumerated
- write_section: drops the whole section after all pairs were written
"""

import logging
import threading
from enum import Flag
from typing import Mapping, Optional

from confstore.core.cache import MISSING, SectionCache, SectionView
from confstore.core.config import ConfStoreSettings, get_config
from confstore.core.drivers.base import StorageDriver
from confstore.core.exceptions import (
    AccessDeniedError,
    ConfStoreError,
    InvalidArgumentError,
    LocationNotFoundError,
    StoreIOError,
)

logger = logging.getLogger("confstore.store")


class Access(Flag):
    """Access requested from check_permission."""
    READ = 1
    WRITE = 2
    READ_WRITE = READ | WRITE


class ConfigStore:
    """
    Cached, lock-serialized key/value store over one StorageDriver.

    Subclasses bind a concrete driver and decide whether a missing
    location is an error (``requires_location``).
    """

    #: Raise LocationNotFoundError on reads when the location is absent
    requires_location: bool = True

    def __init__(self, driver: StorageDriver, settings: Optional[ConfStoreSettings] = None):
        self._driver = driver
        self._settings = settings or get_config()
        self._cache = SectionCache()
        self._lock = threading.RLock()

    def __repr__(self):
        return f"{self.__class__.__name__}({self.location!r})"

    @property
    def location(self) -> str:
        return self._driver.location

    @property
    def cache(self) -> SectionCache:
        return self._cache

    def _require_location(self, operation: str):
        if self.requires_location and not self._driver.location_exists():
            raise LocationNotFoundError(
                f"{self.location} does not exist.",
                location=self.location,
                details={"operation": operation},
            )

    # =========================================================================
    # Single values
    # =========================================================================

    def read_value(self, section: str, key: str, default: str = "") -> str:
        """
        Read one value.

        Args:
            section: Section name
            key: Key name
            default: Returned (and cached) when the value is absent

        Returns:
            Stored value or ``default``

        Raises:
            LocationNotFoundError: store location is absent (file backend)
        """
        if not section or not key:
            return default

        with self._lock:
            self._require_location("read_value")

            cached = self._cache.load(section, key)
            if cached is not MISSING:
                logger.debug(f"Cache hit [{section}] {key}")
                return cached

            try:
                value = self._driver.get(section, key, default)
            except ConfStoreError:
                raise
            except OSError as e:
                raise StoreIOError(
                    f"Failed to read [{section}] {key}",
                    operation="read_value",
                    location=self.location,
                    cause=e,
                ) from e

            if value is None:
                value = default

            self._cache.save(section, key, value)
            logger.debug(f"Cache miss [{section}] {key}, loaded from {self.location}")
            return value

    def write_value(self, section: str, key: str, value: str) -> None:
        """
        Write one value. Empty section or key is a no-op.

        Raises:
            StoreIOError: driver failed; the cache is left untouched
        """
        if not section or not key:
            return

        value = "" if value is None else str(value)

        with self._lock:
            try:
                self._driver.ensure_writable(section)
                self._driver.set(section, key, value)
            except ConfStoreError:
                raise
            except OSError as e:
                logger.warning(f"Write of [{section}] {key} to {self.location} failed: {e}")
                raise StoreIOError(
                    f"Failed to write [{section}] {key}",
                    operation="write_value",
                    location=self.location,
                    cause=e,
                ) from e

            self._cache.delete(section, key)
            logger.debug(f"Wrote [{section}] {key} to {self.location}")

    # =========================================================================
    # Sections
    # =========================================================================

    def read_section(self, section: str) -> Mapping[str, str]:
        """
        Read every key of a section.

        Returns:
            Read-only, case-insensitive snapshot of the section

        Raises:
            LocationNotFoundError: store location is absent (file backend)
            SectionNotFoundError: section does not exist
        """
        if not section:
            return SectionView()

        with self._lock:
            self._require_location("read_section")

            if self._cache.is_complete(section):
                entries = self._cache.section(section)
                if entries:
                    logger.debug(f"Cache hit for section [{section}]")
                    return SectionView(entries)

            try:
                keys = self._driver.enumerate(section)
            except ConfStoreError:
                raise
            except OSError as e:
                raise StoreIOError(
                    f"Failed to enumerate [{section}]",
                    operation="read_section",
                    location=self.location,
                    cause=e,
                ) from e

            # Per-key reads keep single-value caching semantics uniform
            for key in keys:
                self.read_value(section, key)

            self._cache.mark_complete(section, keys)
            return SectionView(self._cache.section(section))

    def write_section(self, section: str, pairs: Optional[Mapping[str, str]]) -> None:
        """
        Write pairs in insertion order.

        Not atomic: the first failing pair stops the loop, earlier pairs
        stay written. The raised StoreIOError carries ``details["written"]``.
        """
        if not section or not pairs:
            return

        with self._lock:
            written = 0
            for key, value in pairs.items():
                try:
                    self.write_value(section, key, value)
                except StoreIOError as e:
                    e.details["written"] = written
                    logger.error(
                        f"write_section [{section}] stopped after {written} of {len(pairs)} pairs"
                    )
                    raise
                written += 1

            self._cache.delete(section)
            logger.debug(f"Wrote {written} pairs to [{section}] in {self.location}")

    # =========================================================================
    # Existence and permissions
    # =========================================================================

    def exists(self, path: Optional[str] = None) -> bool:
        """Whether ``path`` (default: this store's location) exists. Never raises."""
        with self._lock:
            target = path or self._driver.root_path
            try:
                return self._driver.exists(target)
            except (OSError, ValueError) as e:
                logger.debug(f"Existence check for {target} failed: {e}")
                return False

    def check_permission(
        self, path: Optional[str] = None, access: Access = Access.READ_WRITE
    ) -> bool:
        """
        Verify read and/or write access to a location.

        The location need not exist yet when write access is requested;
        the parent container is created if missing.

        Args:
            path: Location to probe (default: this store's location)
            access: Access.READ, Access.WRITE or both

        Returns:
            True when every requested check passed

        Raises:
            InvalidArgumentError: no parent container can be derived
            AccessDeniedError: a probe failed
        """
        if not access & Access.READ_WRITE:
            raise InvalidArgumentError("access must include READ or WRITE.")

        want_write = bool(access & Access.WRITE)

        with self._lock:
            target = path or self._driver.root_path
            if not self._driver.parent_of(target):
                raise InvalidArgumentError("path is invalid.", details={"path": target})

            try:
                if want_write:
                    container = self._driver.container_of(target)
                    self._driver.make_container(container)
                    self._driver.probe_container(container, self._settings.store.probe_prefix)

                if self._driver.exists(target):
                    self._driver.open_target(
                        target, read=bool(access & Access.READ), write=want_write
                    )
                elif want_write:
                    self._driver.probe_placeholder(target)
                else:
                    raise AccessDeniedError(
                        "No read permission or path does not exist.", path=target
                    )
            except ConfStoreError:
                raise
            except OSError as e:
                logger.warning(f"Permission probe on {target} failed: {e}")
                raise AccessDeniedError(
                    f"No {access.name.lower()} permission for {target}",
                    path=target,
                    cause=e,
                ) from e

            return True

    # =========================================================================
    # Maintenance
    # =========================================================================

    def clear_cache(self) -> None:
        """Drop every cached entry"""
        with self._lock:
            self._cache.clear()
