# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Test the YAML module.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import io
from typing import Any, IO
from pathlib import Path
import pytest
from cpuctllibs.helperlibs import YAML
from cpuctllibs.helperlibs.Exceptions import Error

def _assert(fobj: IO[str], expected: str):
    """
    Verify that the contents of the given file object match the expected string.

    Args:
        fobj: A file-like object to be checked.
        expected: The expected string content to compare against.

    Raises:
        AssertionError: If the contents of the file object do not match the expected string.
    """

    fobj.seek(0)
    assert fobj.read().strip() == expected.strip()

def test_yaml_dump(tmp_path: Path):
    """
    Test the YAML dump function.

    Args:
        tmp_path: A temporary directory path for testing (provided by the pytest framework).
    """

    yaml_dict: dict[str, Any] = {"key": "value"}
    fobj = io.StringIO()
    YAML.dump(yaml_dict, fobj)
    _assert(fobj, "key: value")

    # Test dumping to a file defined by a path.
    path = tmp_path / "test.yaml"
    YAML.dump(yaml_dict, path)
    with open(path, "r", encoding="utf-8") as file_obj:
        _assert(file_obj, "key: value")

    # 'None' values are dumped as empty values, paths are dumped as strings.
    yaml_dict = {"key": 1.238, "key2": None, "path": Path("/sys/devices/system/cpu")}

    fobj = io.StringIO()
    YAML.dump(yaml_dict, fobj)
    _assert(fobj, "key: 1.238\nkey2:\npath: /sys/devices/system/cpu")

def test_yaml_load(tmp_path: Path):
    """
    Test the YAML load function.

    Args:
        tmp_path: A temporary directory path for testing (provided by the pytest framework).
    """

    yaml_str = """cpus:
    0:
        online: 1
        thread_siblings_list: "0-1"
    1:
        cpufreq:
"""

    expected = {"cpus": {0: {"online": 1, "thread_siblings_list": "0-1"}, 1: {"cpufreq": None}}}

    fobj = io.StringIO(yaml_str)
    assert YAML.load(fobj) == expected

    path = tmp_path / "test.yaml"
    path.write_text(yaml_str, encoding="utf-8")
    assert YAML.load(path) == expected
    assert YAML.load(str(path)) == expected

    path.write_text("", encoding="utf-8")
    assert YAML.load(path) == {}

def test_yaml_load_errors(tmp_path: Path):
    """
    Test the YAML load function failure modes.

    Args:
        tmp_path: A temporary directory path for testing (provided by the pytest framework).
    """

    with pytest.raises(Error):
        YAML.load(tmp_path / "missing.yaml")

    with pytest.raises(Error):
        YAML.load(io.StringIO("- a\n- b\n"))

    with pytest.raises(Error):
        YAML.load(io.StringIO("key: [unterminated\n"))
