# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Windows registry driver.

Sections map to subkeys of ``<subpath>\\<section>`` under one hive; values
are stored as REG_SZ. Every handle is opened in a ``with`` block so it is
closed on all exit paths.

Path format: Software\\Vendor\\App (hive-relative, backslash separated)
"""

import logging
import sys
import uuid
from enum import Enum
from typing import List, Optional, Union

from confstore.core.drivers.base import StorageDriver
from confstore.core.exceptions import (
    InvalidArgumentError,
    SectionNotFoundError,
    UnsupportedPlatformError,
)

if sys.platform == "win32":
    import winreg
else:
    winreg = None

logger = logging.getLogger("confstore.drivers.registry")


class RegistryHive(Enum):
    """Standard registry hives."""
    CLASSES_ROOT = "HKEY_CLASSES_ROOT"
    CURRENT_USER = "HKEY_CURRENT_USER"
    LOCAL_MACHINE = "HKEY_LOCAL_MACHINE"
    USERS = "HKEY_USERS"
    PERFORMANCE_DATA = "HKEY_PERFORMANCE_DATA"
    CURRENT_CONFIG = "HKEY_CURRENT_CONFIG"

    @classmethod
    def parse(cls, value: Union["RegistryHive", str, None]) -> "RegistryHive":
        """Resolve a hive from an enum, ``CURRENT_USER``, ``HKEY_CURRENT_USER`` or ``HKCU``."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.CURRENT_USER

        name = str(value).upper()
        for hive in cls:
            if name in (hive.name, hive.value):
                return hive
        abbreviations = {
            "HKCR": cls.CLASSES_ROOT,
            "HKCU": cls.CURRENT_USER,
            "HKLM": cls.LOCAL_MACHINE,
            "HKU": cls.USERS,
            "HKCC": cls.CURRENT_CONFIG,
        }
        # Unknown hives fall back to the current user
        return abbreviations.get(name, cls.CURRENT_USER)


def normalize_key_path(path: str) -> str:
    """Use backslashes and drop leading/trailing separators."""
    return path.replace("/", "\\").strip("\\")


class RegistryDriver(StorageDriver):
    """Storage driver over one registry subpath."""

    def __init__(self, registry_path: str, hive: Union[RegistryHive, str, None] = None):
        if winreg is None:
            raise UnsupportedPlatformError(
                "The registry backend requires Windows",
                details={"platform": sys.platform},
            )
        if not registry_path:
            raise InvalidArgumentError("registry_path is required.")

        self.hive = RegistryHive.parse(hive)
        self.registry_path = normalize_key_path(registry_path)
        self.location = f"{self.hive.value}\\{self.registry_path}"
        self._base_key = getattr(winreg, self.hive.value)

    def _section_path(self, section: str) -> str:
        return f"{self.registry_path}\\{section}"

    # -------------------------------------------------------------------------
    # StorageDriver
    # -------------------------------------------------------------------------

    def get(self, section: str, key: str, default: str) -> Optional[str]:
        try:
            reg_key = winreg.OpenKey(self._base_key, self._section_path(section))
        except FileNotFoundError:
            return None

        with reg_key:
            try:
                value, _ = winreg.QueryValueEx(reg_key, key)
            except FileNotFoundError:
                return default

        return default if value is None else str(value)

    def set(self, section: str, key: str, value: str) -> None:
        with winreg.CreateKeyEx(
            self._base_key, self._section_path(section), 0, winreg.KEY_WRITE
        ) as reg_key:
            winreg.SetValueEx(reg_key, key, 0, winreg.REG_SZ, value)

    def enumerate(self, section: str) -> List[str]:
        try:
            reg_key = winreg.OpenKey(self._base_key, self._section_path(section))
        except FileNotFoundError as e:
            raise SectionNotFoundError(
                f"{section} is not found.",
                section=section,
                details={"location": self.location},
                cause=e,
            ) from e

        with reg_key:
            _, value_count, _ = winreg.QueryInfoKey(reg_key)
            return [winreg.EnumValue(reg_key, i)[0] for i in range(value_count)]

    def ensure_writable(self, section: str) -> None:
        self.make_container(self._section_path(section))

    def location_exists(self) -> bool:
        return self.exists(self.registry_path)

    @property
    def root_path(self) -> str:
        return self.registry_path

    def exists(self, path: str) -> bool:
        try:
            with winreg.OpenKey(self._base_key, normalize_key_path(path)):
                return True
        except OSError:
            return False

    def parent_of(self, path: str) -> Optional[str]:
        path = normalize_key_path(path)
        if "\\" not in path:
            return None
        return path.rsplit("\\", 1)[0]

    def container_of(self, path: str) -> str:
        # A key is its own container for values, so a write check creates the
        # target key and leaves it in place
        return normalize_key_path(path)

    def make_container(self, container: str) -> None:
        with winreg.CreateKeyEx(self._base_key, normalize_key_path(container), 0, winreg.KEY_WRITE):
            pass

    def probe_container(self, container: str, prefix: str) -> None:
        name = f"{prefix}{uuid.uuid4()}"
        with winreg.OpenKey(
            self._base_key, normalize_key_path(container), 0, winreg.KEY_SET_VALUE
        ) as reg_key:
            winreg.SetValueEx(reg_key, name, 0, winreg.REG_SZ, "")
            winreg.DeleteValue(reg_key, name)
        logger.debug(f"Write probe succeeded in {self.hive.value}\\{container}")

    def open_target(self, path: str, read: bool, write: bool) -> None:
        access = (winreg.KEY_READ if read else 0) | (winreg.KEY_WRITE if write else 0)
        with winreg.OpenKey(self._base_key, normalize_key_path(path), 0, access):
            pass
