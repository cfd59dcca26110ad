# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""Storage drivers: the physical read/write layer under a ConfigStore."""

from .base import StorageDriver
from .profile import ProfileDriver
from .registry import RegistryDriver, RegistryHive, normalize_key_path

__all__ = [
    "StorageDriver",
    "ProfileDriver",
    "RegistryDriver",
    "RegistryHive",
    "normalize_key_path",
]
