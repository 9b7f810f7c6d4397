# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2023-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide API for reading and writing per-CPU sysfs attributes.

Only a fixed set of attributes is supported, see 'ATTRS'. Each attribute has a parse function
translating the sysfs file contents into a python value, and, for writable attributes, a format
function translating a python value into the string to write. Nothing is cached: every read and
write goes to the file.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import os
import typing
from pathlib import Path
from typing import Any, Callable, Literal, TypedDict
from cpuctllibs.helperlibs import Logging, ClassHelpers, Trivial
from cpuctllibs.helperlibs.Exceptions import Error, ErrorBadFormat, AttributeNotFound, CoreNotFound
from cpuctllibs.helperlibs.Exceptions import AttributeReadError, AttributeWriteError

if typing.TYPE_CHECKING:
    from typing import Final

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpuctl.{__name__}")

# The default CPU sysfs base directory.
SYSFS_BASE: Final[Path] = Path("/sys/devices/system/cpu")

AttrNameType = Literal["online", "cur_freq", "min_freq", "max_freq", "setspeed", "governor",
                       "available_governors", "available_frequencies", "thread_siblings_list"]

class _AttrInfoTypedDict(TypedDict):
    """
    Description of a per-CPU sysfs attribute.

    Attributes:
        path: Path to the attribute file relative to the 'cpu<N>' directory.
        what: A short human-readable description of the attribute for messages.
        parse: The function translating the file contents into a python value.
        format: The function translating a python value into the string to write. 'None' for
                read-only attributes.
    """

    path: str
    what: str
    parse: Callable[[str, str], Any]
    format: Callable[[Any, str], str] | None

def _parse_bool(val: str, what: str) -> bool:
    """Parse an "0"/"1" flag. Any non-zero integer is 'True'."""

    return Trivial.str_to_int(val, base=10, what=what) != 0

def _format_bool(val: bool, what: str) -> str:
    """Format a boolean flag as "1" or "0"."""

    if not isinstance(val, bool):
        raise ErrorBadFormat(f"Bad {what} value '{val}': should be a boolean")
    return "1" if val else "0"

def _parse_int(val: str, what: str) -> int:
    """Parse a decimal integer."""

    return Trivial.str_to_int(val, base=10, what=what)

def _format_int(val: int, what: str) -> str:
    """Format a decimal integer."""

    if isinstance(val, bool):
        raise ErrorBadFormat(f"Bad {what} value '{val}': should be an integer")
    return str(Trivial.str_to_int(val, base=10, what=what))

def _parse_str(val: str, what: str) -> str: # pylint: disable=unused-argument
    """Return the file contents as-is."""

    return val

def _format_str(val: str, what: str) -> str:
    """Format a bare identifier: a non-empty string without white-spaces."""

    if not isinstance(val, str) or not val or len(val.split()) != 1:
        raise ErrorBadFormat(f"Bad {what} value '{val}': should be a non-empty string without "
                             f"white-spaces")
    return val

def _parse_str_list(val: str, what: str) -> list[str]: # pylint: disable=unused-argument
    """Parse a list of white-space separated identifiers."""

    return val.split()

def _parse_int_list(val: str, what: str) -> list[int]:
    """Parse a list of white-space separated decimal integers."""

    return [Trivial.str_to_int(elt, base=10, what=what) for elt in val.split()]

def _parse_cpu_list(val: str, what: str) -> list[int]:
    """Parse a kernel CPU list, e.g., "0-3,8"."""

    return sorted(Trivial.split_csv_line_int(val, dedup=True, base=10, what=what))

ATTRS: Final[dict[AttrNameType, _AttrInfoTypedDict]] = {
    "online": {
        "path": "online",
        "what": "online status",
        "parse": _parse_bool,
        "format": _format_bool,
    },
    "cur_freq": {
        "path": "cpufreq/scaling_cur_freq",
        "what": "current frequency",
        "parse": _parse_int,
        "format": None,
    },
    "min_freq": {
        "path": "cpufreq/scaling_min_freq",
        "what": "minimum frequency",
        "parse": _parse_int,
        "format": _format_int,
    },
    "max_freq": {
        "path": "cpufreq/scaling_max_freq",
        "what": "maximum frequency",
        "parse": _parse_int,
        "format": _format_int,
    },
    "setspeed": {
        "path": "cpufreq/scaling_setspeed",
        "what": "requested frequency",
        # Reads either a frequency or "<unsupported>", so keep it a string.
        "parse": _parse_str,
        "format": _format_int,
    },
    "governor": {
        "path": "cpufreq/scaling_governor",
        "what": "scaling governor",
        "parse": _parse_str,
        "format": _format_str,
    },
    "available_governors": {
        "path": "cpufreq/scaling_available_governors",
        "what": "available scaling governors",
        "parse": _parse_str_list,
        "format": None,
    },
    "available_frequencies": {
        "path": "cpufreq/scaling_available_frequencies",
        "what": "available frequencies",
        "parse": _parse_int_list,
        "format": None,
    },
    "thread_siblings_list": {
        "path": "topology/thread_siblings_list",
        "what": "hyperthread siblings list",
        "parse": _parse_cpu_list,
        "format": None,
    },
}

def _get_attr_info(name: AttrNameType) -> _AttrInfoTypedDict:
    """Return the description dictionary of attribute 'name'."""

    try:
        return ATTRS[name]
    except KeyError:
        raise Error(f"BUG: Unknown CPU attribute '{name}', supported attributes are: "
                    f"{', '.join(ATTRS)}") from None

class SysfsAttrs(ClassHelpers.SimpleCloseContext):
    """
    Provide API for reading and writing per-CPU sysfs attributes.

    Public methods overview.

    1. Raw access.
        * 'read_attribute()' - read the attribute file contents as a string.
        * 'write_attribute()' - write a string to the attribute file.
    2. Typed access.
        * 'read()' - read and parse an attribute.
        * 'write()' - format and write an attribute.
    3. Misc.
        * 'get_path()' - return path to the attribute file.
        * 'get_cpu_path()' - return path to the 'cpu<N>' directory.
    """

    def __init__(self, sysfs_base: Path | str = SYSFS_BASE):
        """
        Initialize a class instance.

        Args:
            sysfs_base: The CPU sysfs base directory, the one containing the 'cpu<N>'
                        sub-directories.
        """

        self.sysfs_base = Path(sysfs_base)

    def get_cpu_path(self, cpu: int) -> Path:
        """
        Return path to the sysfs directory of a CPU.

        Args:
            cpu: The CPU number.

        Returns:
            Path to the 'cpu<N>' directory.
        """

        return self.sysfs_base / f"cpu{cpu}"

    def get_path(self, cpu: int, name: AttrNameType) -> Path:
        """
        Return path to the sysfs file of a CPU attribute.

        Args:
            cpu: The CPU number.
            name: The attribute name.

        Returns:
            Path to the attribute file.
        """

        return self.get_cpu_path(cpu) / _get_attr_info(name)["path"]

    def _get_not_found_error(self, cpu: int, name: AttrNameType, path: Path) -> AttributeNotFound:
        """
        Build the exception object for a missing attribute file.

        Args:
            cpu: The CPU number.
            name: The attribute name.
            path: Path to the missing attribute file.

        Returns:
            'CoreNotFound' if the CPU directory does not exist, 'AttributeNotFound' otherwise.
        """

        cpu_path = self.get_cpu_path(cpu)
        if not cpu_path.is_dir():
            return CoreNotFound(f"CPU{cpu} does not exist: no '{cpu_path}' directory", path=path)

        what = ATTRS[name]["what"]
        return AttributeNotFound(f"The {what} of CPU{cpu} is not available: file '{path}' does "
                                 f"not exist", path=path)

    def read_attribute(self, cpu: int, name: AttrNameType) -> str:
        """
        Read the contents of a CPU attribute file.

        Args:
            cpu: The CPU number.
            name: The attribute name.

        Returns:
            The file contents with trailing white-spaces stripped.

        Raises:
            AttributeNotFound: If the attribute file does not exist ('CoreNotFound' if the CPU does
                               not exist).
            AttributeReadError: If the file could not be read for other reasons.
            ErrorBadFormat: If the file contents are not a UTF-8 text.
        """

        path = self.get_path(cpu, name)

        try:
            with open(path, "r", encoding="utf-8") as fobj:
                val = fobj.read()
        except FileNotFoundError as err:
            raise self._get_not_found_error(cpu, name, path) from err
        except OSError as err:
            what = ATTRS[name]["what"]
            msg = Error(str(err)).indent(2)
            raise AttributeReadError(f"Failed to read the {what} of CPU{cpu} from '{path}':\n"
                                     f"{msg}", errno=err.errno, path=path) from err
        except UnicodeDecodeError as err:
            what = ATTRS[name]["what"]
            msg = Error(str(err)).indent(2)
            raise ErrorBadFormat(f"Bad contents of the {what} sysfs file '{path}': not a UTF-8 "
                                 f"text:\n{msg}", path=path) from err

        val = val.rstrip()
        _LOG.debug("Read '%s' from '%s'", val, path)
        return val

    def write_attribute(self, cpu: int, name: AttrNameType, val: str):
        """
        Write a string to a CPU attribute file. The file is never created.

        Args:
            cpu: The CPU number.
            name: The attribute name.
            val: The string to write.

        Raises:
            AttributeNotFound: If the attribute file does not exist ('CoreNotFound' if the CPU does
                               not exist).
            AttributeWriteError: If the write failed for other reasons, including the kernel
                                 rejecting the value.
        """

        path = self.get_path(cpu, name)
        _LOG.debug("Writing '%s' to '%s'", val, path)

        try:
            fd = os.open(path, os.O_WRONLY | os.O_TRUNC)
            with os.fdopen(fd, "w", encoding="utf-8") as fobj:
                fobj.write(val)
                fobj.flush()
        except FileNotFoundError as err:
            raise self._get_not_found_error(cpu, name, path) from err
        except OSError as err:
            what = ATTRS[name]["what"]
            shortval = val
            if len(shortval) > 24:
                shortval = f"{shortval[:23]}...snip..."
            msg = Error(str(err)).indent(2)
            raise AttributeWriteError(f"Failed to write value '{shortval}' to the {what} of "
                                      f"CPU{cpu} at '{path}':\n{msg}",
                                      errno=err.errno, path=path, value=val) from err

    def read(self, cpu: int, name: AttrNameType) -> Any:
        """
        Read a CPU attribute and translate it into a python value.

        Args:
            cpu: The CPU number.
            name: The attribute name.

        Returns:
            The parsed attribute value. The type depends on the attribute, see 'ATTRS'.

        Raises:
            ErrorBadFormat: If the file contents cannot be parsed.
        """

        val = self.read_attribute(cpu, name)

        info = ATTRS[name]
        try:
            return info["parse"](val, info["what"])
        except ErrorBadFormat as err:
            path = self.get_path(cpu, name)
            raise ErrorBadFormat(f"Bad contents of the {info['what']} sysfs file '{path}':\n"
                                 f"{err.indent(2)}", path=path) from err

    def write(self, cpu: int, name: AttrNameType, val: Any):
        """
        Translate a python value into a string and write it to a CPU attribute file.

        Args:
            cpu: The CPU number.
            name: The attribute name.
            val: The value to write. The type depends on the attribute, see 'ATTRS'.

        Raises:
            ErrorBadFormat: If the value cannot be formatted for the attribute.
        """

        info = _get_attr_info(name)
        fmt = info["format"]
        if not fmt:
            raise Error(f"BUG: The {info['what']} attribute is read-only")

        self.write_attribute(cpu, name, fmt(val, info["what"]))
