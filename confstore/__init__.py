# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""ConfStore - unified section/key/value access to INI files and the Windows registry"""

__version__ = "1.0.0"

from .core import (
    Access,
    ConfigStore,
    IniFileStore,
    RegistryHive,
    RegistryStore,
    StoreKind,
    create_store,
)

__all__ = [
    "__version__",
    "Access",
    "ConfigStore",
    "IniFileStore",
    "RegistryHive",
    "RegistryStore",
    "StoreKind",
    "create_store",
]
