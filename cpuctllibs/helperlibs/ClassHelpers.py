# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Miscellaneous common helpers for class objects.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from typing import Any
from cpuctllibs.helperlibs import Logging

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpuctl.{__name__}")

class SimpleCloseContext:
    """
    Provide a simple context manager implementation for classes.

    This class can be subclassed to avoid duplicating the implementation of the '__enter__()' and
    '__exit__()' methods. It ensures that the 'close()' method is called automatically when exiting
    the runtime context.
    """

    def close(self):
        """Uninitialize the class object. Supposed to be implemented by the subclass."""

    def __enter__(self):
        """Enter the run-time context."""
        return self

    def __exit__(self, *_: Any):
        """Exit from the runtime context."""

        self.close()

def close(cls_obj: Any,
          close_attrs: list[str] | tuple[str, ...] = tuple()):
    """
    Uninitialize a class object by freeing objects referred to by its attributes.

    Args:
        cls_obj: The class object to uninitialize.
        close_attrs: Attribute names referring to objects created by the class object. These objects
                     are closed by calling their 'close()' method, and then set to 'None'. Closing
                     is skipped if the class object has the '_close_{attr}' attribute set to
                     'False' (for objects that were passed to the class object by the user).
    """

    for attr in close_attrs:
        if not hasattr(cls_obj, attr):
            _LOG.debug("close(close_attrs=<attrs>): non-existing attribute '%s' in '%s'",
                       attr, cls_obj)

        obj = getattr(cls_obj, attr, None)
        if not obj:
            continue

        if attr.startswith("_"):
            name = f"_close{attr}"
        else:
            name = f"_close_{attr}"

        run_close = getattr(cls_obj, name, True)
        if run_close and hasattr(obj, "close"):
            getattr(obj, "close")()

        setattr(cls_obj, attr, None)
