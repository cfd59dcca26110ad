# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""Store factory: pick a backend by kind."""

from enum import Enum
from typing import Optional, Union

from confstore.core.config import ConfStoreSettings
from confstore.core.drivers.registry import RegistryHive
from confstore.core.exceptions import InvalidArgumentError
from confstore.core.store import ConfigStore
from confstore.core.stores import IniFileStore, RegistryStore


class StoreKind(Enum):
    """Supported backends."""
    INI_FILE = "ini"
    REGISTRY = "registry"


def create_store(
    kind: Union[StoreKind, str],
    location: str,
    hive: Union[RegistryHive, str, None] = None,
    settings: Optional[ConfStoreSettings] = None,
) -> ConfigStore:
    """
    Create a config store.

    Args:
        kind: StoreKind or its value ("ini", "registry")
        location: File path, or hive-relative key path for the registry
        hive: Registry hive (registry only)
        settings: Library settings, defaults to get_config()

    Raises:
        InvalidArgumentError: unknown kind
    """
    try:
        kind = StoreKind(kind)
    except ValueError as e:
        raise InvalidArgumentError(
            f"Not supported store kind: {kind!r}",
            details={"supported": [k.value for k in StoreKind]},
            cause=e,
        ) from e

    if kind is StoreKind.INI_FILE:
        return IniFileStore(location, settings=settings)
    return RegistryStore(location, hive=hive, settings=settings)
