# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Exception types used in this project.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from typing import Any, Match
import re

class Error(Exception):
    """The base class for all exceptions raised by this project."""

    def __init__(self, msg: str, *args: Any, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            **kwargs: Additional keyword arguments, stored as attributes of the exception object.
        """

        msg = str(msg)
        super().__init__(msg)

        for key, val in kwargs.items():
            setattr(self, key, val)

        if args:
            self.msg = msg % tuple(args)
        else:
            self.msg = msg

    def indent(self, indent: int | str, capitalize: bool = True) -> str:
        """
        Indent/prefix each line in the error message.

        Args:
            indent: Can be an integer or a string. If an integer, each line of the error message is
                    prefixed with the specified number of white spaces. If a string, each line is
                    prefixed with the specified string.
            capitalize: If True, ensures the message starts with a capital letter.

        Returns:
            str: The modified error message.
        """

        def capitalize_mobj(mobj: Match[str]):
            """Capitalize the intended/prefixed message."""

            return mobj.group(1) + mobj.group(2).capitalize()

        if isinstance(indent, int):
            pfx = " " * indent
        else:
            pfx = indent

        msg = pfx + self.msg.replace("\n", f"\n{pfx}")
        if capitalize:
            msg = re.sub(r"^(\s*)(\S)", capitalize_mobj, msg)

        return msg

    def __str__(self):
        """The string representation of the exception."""
        return self.msg

class ErrorNotFound(Error):
    """Something was not found."""

class ErrorNotSupported(Error):
    """Feature/option/etc is not supported."""

class ErrorBadFormat(Error):
    """Bad format of something, e.g., file contents."""

class DiscoveryError(Error):
    """The CPU control hierarchy root directory does not exist or cannot be read."""

class AttributeNotFound(ErrorNotFound):
    """The control file of a CPU attribute does not exist."""

class CoreNotFound(AttributeNotFound):
    """The CPU does not exist: there is no 'cpu<N>' directory for it."""

class AttributeReadError(Error):
    """
    Failed to read a CPU attribute control file for a reason other than the file not existing.

    Attributes:
        errno: The 'errno' value of the underlying OS error, or 'None'.
        path: Path to the control file.
    """

    def __init__(self, msg: str, *args: Any, errno: int | None = None, path: Any = None,
                 **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            errno: The 'errno' value of the underlying OS error.
            path: Path to the control file.
            **kwargs: Additional keyword arguments.
        """

        self.errno = errno
        self.path = path

        super().__init__(msg, *args, **kwargs)

class AttributeWriteError(Error):
    """
    Failed to write a CPU attribute control file for a reason other than the file not existing.

    Attributes:
        errno: The 'errno' value of the underlying OS error, or 'None'.
        path: Path to the control file.
        value: The value that was being written.
    """

    def __init__(self, msg: str, *args: Any, errno: int | None = None, path: Any = None,
                 value: str | None = None, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            errno: The 'errno' value of the underlying OS error.
            path: Path to the control file.
            value: The value that was being written.
            **kwargs: Additional keyword arguments.
        """

        self.errno = errno
        self.path = path
        self.value = value

        super().__init__(msg, *args, **kwargs)

class InvalidFrequency(AttributeWriteError):
    """The frequency value is not valid or was rejected by the kernel."""

class ProtectedCoreError(Error):
    """The CPU cannot be taken offline."""

class LastCoreError(Error):
    """The CPU is the last online CPU and cannot be taken offline."""

class UnsupportedOperation(ErrorNotSupported):
    """The operation is not available for the CPU (e.g., not supported by its cpufreq driver)."""

class UnknownGovernor(Error):
    """
    The requested governor is not in the list of governors available for the CPU.

    Attributes:
        governor: The requested governor name.
        available: The list of available governor names.
    """

    def __init__(self, msg: str, *args: Any, governor: str | None = None,
                 available: list[str] | None = None, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            governor: The requested governor name.
            available: The list of available governor names.
            **kwargs: Additional keyword arguments.
        """

        self.governor = governor
        if available is None:
            available = []
        self.available = available

        super().__init__(msg, *args, **kwargs)

class NoSiblingFound(ErrorNotFound):
    """The CPU has no hyperthread siblings."""
