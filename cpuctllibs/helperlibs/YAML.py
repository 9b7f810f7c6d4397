# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide YAML file reading and writing capabilities.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path, PosixPath
from typing import Any, IO
import yaml
from cpuctllibs.helperlibs import Logging
from cpuctllibs.helperlibs.Exceptions import Error

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpuctl.{__name__}")

def _represent_none(dumper: yaml.SafeDumper, _) -> yaml.ScalarNode:
    """Represent 'None' values as empty strings in YAML output."""

    return dumper.represent_scalar("tag:yaml.org,2002:null", "")

def _represent_posixpath(dumper: yaml.SafeDumper, value: PosixPath) -> yaml.ScalarNode:
    """Represent a 'PosixPath' object as a YAML string."""

    return dumper.represent_scalar("tag:yaml.org,2002:str", str(value))

def dump(data: dict[Any, Any], path: Path | IO[str]):
    """
    Dump a dictionary to a YAML file.

    Args:
        data: The dictionary to dump.
        path: The file path or file object to write the YAML data to.
    """

    yaml.SafeDumper.add_representer(type(None), _represent_none)
    yaml.SafeDumper.add_representer(PosixPath, _represent_posixpath)

    try:
        if hasattr(path, "write"):
            yaml.safe_dump(data, path, default_flow_style=False, sort_keys=False)
        else:
            with open(path, "w", encoding="utf-8") as fobj:
                yaml.safe_dump(data, fobj, default_flow_style=False, sort_keys=False)
            _LOG.debug("Wrote YAML file at '%s'", path)
    except OSError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"Failed to write YAML file '{path}':\n{msg}") from err

def load(path: str | Path | IO[str]) -> dict[Any, Any]:
    """
    Load a YAML file.

    Args:
        path: Path to the YAML file to load or a file-like object to read the YAML contents from.

    Returns:
        A dictionary representing the contents of the loaded YAML file. An empty dictionary if the
        file is empty.
    """

    try:
        if hasattr(path, "read"):
            loaded = yaml.safe_load(path)
        else:
            with open(path, "r", encoding="utf-8") as fobj:
                loaded = yaml.safe_load(fobj)
    except yaml.YAMLError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"Failed to parse YAML file '{path}':\n{msg}") from None
    except OSError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"Failed to read YAML file '{path}':\n{msg}") from None

    if not loaded:
        return {}

    if not isinstance(loaded, dict):
        raise Error(f"Bad YAML file '{path}': the top level object must be a dictionary, got "
                    f"'{type(loaded).__name__}'")

    _LOG.debug("Loaded YAML file at '%s'", path)
    return loaded
