# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
ConfStore Core - Init file

Exports the config store contract, both backends and the factory.
"""

from .cache import MISSING, CaseInsensitiveDict, SectionCache, SectionView
from .config import ConfStoreSettings, get_config, load_config, reload_config
from .exceptions import (
    AccessDeniedError,
    ConfStoreError,
    InvalidArgumentError,
    LocationNotFoundError,
    SectionNotFoundError,
    StoreIOError,
    UnsupportedPlatformError,
)
from .drivers import ProfileDriver, RegistryDriver, RegistryHive, StorageDriver
from .store import Access, ConfigStore
from .stores import IniFileStore, RegistryStore
from .factory import StoreKind, create_store

__all__ = [
    # Contract
    "ConfigStore",
    "Access",
    # Backends
    "IniFileStore",
    "RegistryStore",
    "RegistryHive",
    # Factory
    "StoreKind",
    "create_store",
    # Drivers
    "StorageDriver",
    "ProfileDriver",
    "RegistryDriver",
    # Cache
    "SectionCache",
    "SectionView",
    "CaseInsensitiveDict",
    "MISSING",
    # Settings
    "ConfStoreSettings",
    "get_config",
    "load_config",
    "reload_config",
    # Errors
    "ConfStoreError",
    "LocationNotFoundError",
    "SectionNotFoundError",
    "InvalidArgumentError",
    "AccessDeniedError",
    "StoreIOError",
    "UnsupportedPlatformError",
]
