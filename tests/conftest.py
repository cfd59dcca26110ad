# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""Shared fixtures and storage driver test doubles."""

import os
from collections import Counter
from typing import Dict, List, Optional, Set, Tuple

import pytest

os.environ.setdefault("CONFSTORE_NO_FILE_LOGS", "true")

from confstore.core.cache import CaseInsensitiveDict
from confstore.core.config import ConfStoreSettings
from confstore.core.drivers.base import StorageDriver
from confstore.core.drivers.profile import ProfileDriver
from confstore.core.drivers.registry import normalize_key_path
from confstore.core.exceptions import SectionNotFoundError
from confstore.core.stores import IniFileStore, RegistryStore


class CountingProfileDriver(ProfileDriver):
    """ProfileDriver that counts calls and can fail writes for chosen keys."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = Counter()
        self.fail_keys: Set[str] = set()

    def get(self, section, key, default):
        self.calls["get"] += 1
        return super().get(section, key, default)

    def set(self, section, key, value):
        self.calls["set"] += 1
        if key in self.fail_keys:
            raise OSError(28, "No space left on device")
        super().set(section, key, value)

    def enumerate(self, section):
        self.calls["enumerate"] += 1
        return super().enumerate(section)


class FakeRegistryDriver(StorageDriver):
    """In-memory registry: key path -> value name -> string."""

    def __init__(self, registry_path: str = "Software\\ConfStoreTest"):
        self.registry_path = normalize_key_path(registry_path)
        self.location = f"HKEY_CURRENT_USER\\{self.registry_path}"
        self.keys: Dict[str, CaseInsensitiveDict] = {}
        self.calls = Counter()
        self.fail_keys: Set[str] = set()
        self.denied: Set[str] = set()
        self.broken_paths: Set[str] = set()
        self.opened: List[Tuple[str, bool, bool]] = []

    def _section_path(self, section: str) -> str:
        return f"{self.registry_path}\\{section}"

    def _entries(self, path: str) -> Optional[CaseInsensitiveDict]:
        return self.keys.get(normalize_key_path(path).casefold())

    def get(self, section, key, default):
        self.calls["get"] += 1
        entries = self._entries(self._section_path(section))
        if entries is None:
            return None
        return entries.get(key, default)

    def set(self, section, key, value):
        self.calls["set"] += 1
        if key in self.fail_keys:
            raise PermissionError(13, "Access is denied")
        self.make_container(self._section_path(section))
        self._entries(self._section_path(section))[key] = value

    def enumerate(self, section) -> List[str]:
        self.calls["enumerate"] += 1
        entries = self._entries(self._section_path(section))
        if entries is None:
            raise SectionNotFoundError(f"{section} is not found.", section=section)
        return list(entries)

    def ensure_writable(self, section):
        self.make_container(self._section_path(section))

    def location_exists(self):
        return self.exists(self.registry_path)

    @property
    def root_path(self):
        return self.registry_path

    def exists(self, path):
        self.calls["exists"] += 1
        if path in self.broken_paths:
            raise OSError(87, "The parameter is incorrect")
        return self._entries(path) is not None

    def parent_of(self, path):
        path = normalize_key_path(path)
        if "\\" not in path:
            return None
        return path.rsplit("\\", 1)[0]

    def container_of(self, path):
        return normalize_key_path(path)

    def make_container(self, container):
        parts = normalize_key_path(container).split("\\")
        for i in range(1, len(parts) + 1):
            self.keys.setdefault("\\".join(parts[:i]).casefold(), CaseInsensitiveDict())

    def probe_container(self, container, prefix):
        self.calls["probe_container"] += 1
        if normalize_key_path(container) in self.denied:
            raise PermissionError(5, "Access is denied")
        entries = self._entries(container)
        name = f"{prefix}probe"
        entries[name] = ""
        del entries[name]

    def open_target(self, path, read, write):
        self.calls["open_target"] += 1
        self.opened.append((normalize_key_path(path), read, write))
        if normalize_key_path(path) in self.denied:
            raise PermissionError(5, "Access is denied")


@pytest.fixture
def settings():
    """Default settings, independent of the user's config files"""
    return ConfStoreSettings()


@pytest.fixture
def ini_path(tmp_path):
    return tmp_path / "conf" / "app.ini"


@pytest.fixture
def profile_driver(ini_path):
    return CountingProfileDriver(ini_path)


@pytest.fixture
def ini_store(ini_path, profile_driver, settings):
    """IniFileStore over a counting driver; the file does not exist yet"""
    return IniFileStore(ini_path, settings=settings, driver=profile_driver)


@pytest.fixture
def registry_driver():
    return FakeRegistryDriver()


@pytest.fixture
def registry_store(registry_driver, settings):
    return RegistryStore(registry_driver.registry_path, settings=settings, driver=registry_driver)
