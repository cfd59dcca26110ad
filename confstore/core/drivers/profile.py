# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Profile (INI) file driver.

Reads and writes the classic profile layout::

    [Section]
    Key=Value

with the lookup rules of the Windows private-profile API: section and key
names match case-insensitively, a write keeps the spelling already present
in the file, and section enumeration goes through a NUL-delimited buffer.

Like the native API the reader is lenient. A UTF-8 byte order mark is
skipped, entries before the first section header and lines without ``=``
are ignored, and bytes the configured encoding cannot decode survive a
read/write cycle unchanged. Values with surrounding blanks (or values that
are already quoted) are stored in double quotes, and one pair of quotes is
removed on read.
"""

import codecs
import configparser
import logging
import os
import shutil
import tempfile
from typing import Iterable, Iterator, List, Optional

from confstore.core.drivers.base import StorageDriver
from confstore.core.exceptions import SectionNotFoundError, StoreIOError

logger = logging.getLogger("confstore.drivers.profile")

# Never matches a real section, so configparser's DEFAULT magic stays off
_NO_DEFAULT_SECTION = "\x00"

# Undecodable bytes become lone surrogates and are written back as-is
_ERRORS = "surrogateescape"

_NEW_FILE_MODE = 0o644


def _profile_lines(lines: Iterable[str]) -> Iterator[str]:
    """Drop the lines GetPrivateProfileString skips."""
    in_section = False
    in_entry = False
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped[0] in "#;":
            yield line
        elif configparser.ConfigParser.SECTCRE.match(stripped):
            in_section = True
            in_entry = False
            yield line
        elif in_entry and line[0] in " \t":
            # continuation of a multi-line value
            yield line
        elif in_section and "=" in stripped and stripped.partition("=")[0].strip():
            in_entry = True
            yield line
        else:
            logger.debug(f"Ignoring profile line {stripped!r}")
            in_entry = False


def _quote(value: str) -> str:
    if value != value.strip() or (len(value) >= 2 and value[0] == value[-1] == '"'):
        return f'"{value}"'
    return value


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


class ProfileDriver(StorageDriver):
    """Storage driver over a single profile file."""

    def __init__(self, file_path: str, buffer_size: int = 32767, encoding: str = "utf-8"):
        self.file_path = os.path.abspath(os.fspath(file_path))
        self.location = self.file_path
        self.buffer_size = buffer_size
        self.encoding = encoding

    # -------------------------------------------------------------------------
    # Parsing helpers
    # -------------------------------------------------------------------------

    @property
    def _read_encoding(self) -> str:
        if codecs.lookup(self.encoding).name == "utf-8":
            return "utf-8-sig"
        return self.encoding

    def _new_parser(self) -> configparser.ConfigParser:
        parser = configparser.ConfigParser(
            interpolation=None,
            strict=False,
            delimiters=("=",),
            default_section=_NO_DEFAULT_SECTION,
        )
        parser.optionxform = str
        return parser

    def _read_lines(self) -> List[str]:
        with open(self.file_path, "r", encoding=self._read_encoding, errors=_ERRORS) as f:
            return f.readlines()

    def _load(self) -> Optional[configparser.ConfigParser]:
        if not os.path.isfile(self.file_path):
            return None

        parser = self._new_parser()
        try:
            parser.read_file(_profile_lines(self._read_lines()), source=self.file_path)
        except (configparser.Error, UnicodeError) as e:
            raise StoreIOError(
                f"Malformed profile file: {self.file_path}",
                operation="parse",
                location=self.file_path,
                cause=e,
            ) from e
        return parser

    def _save(self, parser: configparser.ConfigParser) -> None:
        """Write to a sibling temp file, then swap it in."""
        directory = os.path.dirname(self.file_path)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{os.path.basename(self.file_path)}.", suffix=".tmp", dir=directory
        )
        try:
            with open(fd, "w", encoding=self.encoding, errors=_ERRORS) as f:
                parser.write(f, space_around_delimiters=False)
            if os.path.exists(self.file_path):
                shutil.copymode(self.file_path, tmp_path)
            else:
                os.chmod(tmp_path, _NEW_FILE_MODE)
            os.replace(tmp_path, self.file_path)
        except BaseException:
            os.remove(tmp_path)
            raise

    @staticmethod
    def _match(names, wanted: str) -> Optional[str]:
        folded = wanted.casefold()
        for name in names:
            if name.casefold() == folded:
                return name
        return None

    # -------------------------------------------------------------------------
    # Raw profile calls
    # -------------------------------------------------------------------------

    def get_value(self, section: str, key: str, default: str, buffer_size: int) -> str:
        """Equivalent of GetPrivateProfileString for one key."""
        parser = self._load()
        value = default
        if parser is not None:
            section_name = self._match(parser.sections(), section)
            if section_name is not None:
                option = self._match(parser.options(section_name), key)
                if option is not None:
                    value = _unquote(parser.get(section_name, option))
        return value[: max(buffer_size - 1, 0)]

    def set_value(self, section: str, key: str, value: str) -> None:
        """Equivalent of WritePrivateProfileString."""
        parser = self._load() or self._new_parser()

        section_name = self._match(parser.sections(), section)
        if section_name is None:
            section_name = section
            parser.add_section(section_name)

        option = self._match(parser.options(section_name), key) or key
        parser.set(section_name, option, _quote(value))
        self._save(parser)

    def get_section_raw(self, section: str) -> bytes:
        """
        Key names of a section as ``key1\\0key2\\0\\0``.

        Returns:
            Encoded buffer, or b"" when the section is absent or empty
        """
        parser = self._load()
        if parser is None:
            return b""

        section_name = self._match(parser.sections(), section)
        if section_name is None:
            return b""

        options = parser.options(section_name)
        if not options:
            return b""

        return ("\0".join(options) + "\0\0").encode(self.encoding, _ERRORS)

    # -------------------------------------------------------------------------
    # StorageDriver
    # -------------------------------------------------------------------------

    def get(self, section: str, key: str, default: str) -> Optional[str]:
        return self.get_value(section, key, default, self.buffer_size)

    def set(self, section: str, key: str, value: str) -> None:
        self.set_value(section, key, value)

    def enumerate(self, section: str) -> List[str]:
        raw = self.get_section_raw(section)
        if not raw:
            raise SectionNotFoundError(
                f"{section} is not found.",
                section=section,
                details={"location": self.file_path},
            )
        return [token for token in raw.decode(self.encoding, _ERRORS).split("\0") if token]

    def ensure_writable(self, section: str) -> None:
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def location_exists(self) -> bool:
        return os.path.isfile(self.file_path)

    @property
    def root_path(self) -> str:
        return self.file_path

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def parent_of(self, path: str) -> Optional[str]:
        return os.path.dirname(path) or None

    def container_of(self, path: str) -> str:
        return os.path.dirname(path)

    def make_container(self, container: str) -> None:
        os.makedirs(container, exist_ok=True)

    def probe_container(self, container: str, prefix: str) -> None:
        fd, probe_path = tempfile.mkstemp(prefix=prefix, dir=container)
        try:
            os.close(fd)
        finally:
            os.remove(probe_path)
        logger.debug(f"Write probe succeeded in {container}")

    def open_target(self, path: str, read: bool, write: bool) -> None:
        if read and write:
            flags = os.O_RDWR
        elif write:
            flags = os.O_WRONLY
        else:
            flags = os.O_RDONLY
        os.close(os.open(path, flags))

    def probe_placeholder(self, path: str) -> None:
        with open(path, "xb"):
            pass
        os.remove(path)

    # -------------------------------------------------------------------------
    # Whole-file text helpers
    # -------------------------------------------------------------------------

    def read_all_text(self, path: str) -> str:
        with open(path, "r", encoding=self.encoding) as f:
            return f.read()

    def write_all_text(self, path: str, contents: str) -> None:
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding=self.encoding) as f:
            f.write(contents)
