# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import sys

import pytest

from confstore.core.drivers.registry import RegistryDriver, RegistryHive, normalize_key_path
from confstore.core.exceptions import (
    SectionNotFoundError,
    StoreIOError,
    UnsupportedPlatformError,
)
from confstore.core.stores import RegistryStore


def test_missing_key_path_reads_default(registry_store, registry_driver):
    """Unlike the file backend, a missing location is not an error"""
    assert registry_store.read_value("Net", "Host", "fallback") == "fallback"
    assert registry_driver.calls["get"] == 1


def test_round_trip(registry_store):
    registry_store.write_value("Net", "Host", "localhost")

    assert registry_store.read_value("NET", "host", "") == "localhost"


def test_write_invalidates_single_key(registry_store, registry_driver):
    registry_store.write_section("Net", {"Host": "a", "Port": "1"})
    registry_store.read_section("Net")
    gets = registry_driver.calls["get"]

    registry_store.write_value("Net", "Host", "b")

    assert registry_store.read_value("Net", "Port") == "1"
    assert registry_driver.calls["get"] == gets
    assert registry_store.read_value("Net", "Host") == "b"
    assert registry_driver.calls["get"] == gets + 1


def test_read_section(registry_store, registry_driver):
    registry_store.write_section("Net", {"Host": "localhost", "Port": "8080"})

    assert registry_store.read_section("Net") == {"Host": "localhost", "Port": "8080"}
    assert registry_store.read_section("net") == {"Host": "localhost", "Port": "8080"}
    assert registry_driver.calls["enumerate"] == 1


def test_read_section_empty_key(registry_store, registry_driver):
    """An existing key without values reads as an empty section"""
    registry_driver.make_container(f"{registry_driver.registry_path}\\Empty")

    assert registry_store.read_section("Empty") == {}
    # empty sections are never served from the cache
    registry_store.read_section("Empty")
    assert registry_driver.calls["enumerate"] == 2


def test_read_section_missing(registry_store):
    with pytest.raises(SectionNotFoundError):
        registry_store.read_section("Nope")


def test_write_failure_is_wrapped(registry_store, registry_driver):
    registry_driver.fail_keys.add("Locked")

    with pytest.raises(StoreIOError) as exc_info:
        registry_store.write_section("Net", {"Host": "a", "Locked": "b", "Port": "c"})

    error = exc_info.value
    assert error.details["written"] == 1
    assert error.location == registry_driver.location
    assert isinstance(error.cause, PermissionError)
    assert registry_store.read_value("Net", "Port", "none") == "none"


def test_exists_swallows_driver_errors(registry_store, registry_driver):
    registry_driver.broken_paths.add("Bad\\Path")

    assert registry_store.exists("Bad\\Path") is False
    assert registry_store.exists() is False

    registry_store.write_value("Net", "Host", "x")

    assert registry_store.exists() is True
    assert registry_store.exists(f"{registry_driver.registry_path}\\Net") is True


def test_hive_parse():
    assert RegistryHive.parse(None) is RegistryHive.CURRENT_USER
    assert RegistryHive.parse("HKLM") is RegistryHive.LOCAL_MACHINE
    assert RegistryHive.parse("hkey_users") is RegistryHive.USERS
    assert RegistryHive.parse("CURRENT_CONFIG") is RegistryHive.CURRENT_CONFIG
    assert RegistryHive.parse(RegistryHive.CLASSES_ROOT) is RegistryHive.CLASSES_ROOT
    assert RegistryHive.parse("HKEY_NOWHERE") is RegistryHive.CURRENT_USER


def test_normalize_key_path():
    assert normalize_key_path("/Software/Vendor/App/") == "Software\\Vendor\\App"


@pytest.mark.skipif(sys.platform == "win32", reason="non-Windows behaviour")
def test_registry_driver_requires_windows():
    with pytest.raises(UnsupportedPlatformError):
        RegistryDriver("Software\\ConfStoreTest")


@pytest.mark.skipif(sys.platform != "win32", reason="Windows-only test")
def test_real_registry_round_trip(settings):
    """Round trip against HKCU; cleans up after itself"""
    import uuid
    import winreg

    subpath = f"Software\\ConfStoreTest\\{uuid.uuid4().hex}"
    store = RegistryStore(subpath, hive="HKCU", settings=settings)

    try:
        assert store.exists() is False
        store.write_section("Net", {"Host": "localhost", "Port": "8080"})

        assert store.read_section("Net") == {"Host": "localhost", "Port": "8080"}
        assert store.read_value("net", "HOST") == "localhost"
        assert store.check_permission() is True
    finally:
        winreg.DeleteKey(winreg.HKEY_CURRENT_USER, f"{subpath}\\Net")
        winreg.DeleteKey(winreg.HKEY_CURRENT_USER, subpath)
