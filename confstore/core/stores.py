# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Concrete config stores, one per backend.

IniFileStore   - profile (INI) file; reads fail if the file is missing
RegistryStore  - Windows registry subpath; a missing key path reads as defaults
"""

import logging
import os
from typing import Optional, Union

from confstore.core.config import ConfStoreSettings, get_config
from confstore.core.drivers.base import StorageDriver
from confstore.core.drivers.profile import ProfileDriver
from confstore.core.drivers.registry import RegistryDriver, RegistryHive
from confstore.core.exceptions import LocationNotFoundError, StoreIOError
from confstore.core.store import ConfigStore

logger = logging.getLogger("confstore.stores")


class IniFileStore(ConfigStore):
    """
    Config store backed by a profile file.

    Also exposes plain whole-file text helpers that bypass the cache.
    """

    requires_location = True

    def __init__(
        self,
        file_path: Union[str, os.PathLike],
        settings: Optional[ConfStoreSettings] = None,
        driver: Optional[StorageDriver] = None,
    ):
        settings = settings or get_config()
        if driver is None:
            driver = ProfileDriver(
                file_path,
                buffer_size=settings.store.profile_buffer_size,
                encoding=settings.store.encoding,
            )
        super().__init__(driver, settings)

    def get_file_path(self) -> str:
        return self.location

    def read_all_text(self, path: Union[str, os.PathLike]) -> str:
        with self._lock:
            try:
                return self._driver.read_all_text(path)
            except FileNotFoundError as e:
                raise LocationNotFoundError(
                    f"{path} does not exist.", location=os.fspath(path), cause=e
                ) from e
            except OSError as e:
                raise StoreIOError(
                    f"Failed to read {path}",
                    operation="read_all_text",
                    location=os.fspath(path),
                    cause=e,
                ) from e

    def write_all_text(self, path: Union[str, os.PathLike], contents: str) -> None:
        with self._lock:
            try:
                self._driver.write_all_text(path, contents)
            except OSError as e:
                raise StoreIOError(
                    f"Failed to write {path}",
                    operation="write_all_text",
                    location=os.fspath(path),
                    cause=e,
                ) from e

    def file_exists(self, path: Union[str, os.PathLike]) -> bool:
        return os.path.isfile(path)


class RegistryStore(ConfigStore):
    """Config store backed by ``<hive>\\<registry_path>\\<section>`` keys."""

    requires_location = False

    def __init__(
        self,
        registry_path: str,
        hive: Union[RegistryHive, str, None] = None,
        settings: Optional[ConfStoreSettings] = None,
        driver: Optional[StorageDriver] = None,
    ):
        settings = settings or get_config()
        if driver is None:
            driver = RegistryDriver(registry_path, hive or settings.store.default_hive)
        super().__init__(driver, settings)
