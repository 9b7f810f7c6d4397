#!/usr/bin/env python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2022-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Test the 'EmulSysfs' module, which fabricates CPU sysfs hierarchies for the other tests."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import io
from pathlib import Path
import pytest
import common
from cpuctllibs import CPUCtl
from cpuctllibs.testlibs import EmulSysfs
from cpuctllibs.helperlibs.Exceptions import Error

def _list_files(basepath: Path) -> dict[str, str]:
    """Return a dictionary of all files under 'basepath' and their stripped contents."""

    files = {}
    for path in sorted(basepath.rglob("*")):
        if path.is_file():
            files[str(path.relative_to(basepath))] = path.read_text(encoding="utf-8").strip()
    return files

def test_populate(tmp_path: Path):
    """
    Verify the files fabricated from a dataset.

    Args:
        tmp_path: A temporary directory path (provided by the pytest framework).
    """

    dataset: EmulSysfs.DatasetTypedDict = {
        "cpufreq": {"scaling_governor": "powersave",
                    "scaling_available_governors": ["performance", "powersave"],
                    "scaling_setspeed": None},
        "cpus": {0: {"thread_siblings_list": [0, 1]},
                 1: {"online": True, "thread_siblings_list": "0-1",
                     "cpufreq": {"scaling_setspeed": 800000, "scaling_governor": "userspace"}},
                 2: {"online": 0, "cpufreq": None}},
        "extra_dirs": ["cpuidle"],
    }

    sysfs_base = EmulSysfs.populate(tmp_path / "cpu", dataset)
    assert sysfs_base == tmp_path / "cpu"

    assert _list_files(sysfs_base) == {
        "cpu0/cpufreq/scaling_available_governors": "performance powersave",
        "cpu0/cpufreq/scaling_governor": "powersave",
        "cpu0/topology/thread_siblings_list": "0,1",
        "cpu1/cpufreq/scaling_available_governors": "performance powersave",
        "cpu1/cpufreq/scaling_governor": "userspace",
        "cpu1/cpufreq/scaling_setspeed": "800000",
        "cpu1/online": "1",
        "cpu1/topology/thread_siblings_list": "0-1",
        "cpu2/online": "0",
    }
    assert (sysfs_base / "cpuidle").is_dir()
    assert (sysfs_base / "cpu2").is_dir()

def test_collect(tmp_path: Path, dataset: str):
    """
    Verify that a dataset collected from a fabricated hierarchy describes the same hierarchy.

    Args:
        tmp_path: A temporary directory path (provided by the pytest framework).
        dataset: Name of the dataset to test with.
    """

    sysfs_base = common.build_sysfs(tmp_path / "orig", dataset)
    collected = EmulSysfs.collect(sysfs_base, description="collected")
    assert collected["description"] == "collected"

    path = tmp_path / "collected.yaml"
    EmulSysfs.dump(collected, path)
    copy_base = EmulSysfs.populate(tmp_path / "copy", EmulSysfs.load(path))

    # Extra directories are not collected, and only the files 'CPUCtl' uses are.
    assert _list_files(copy_base) == _list_files(sysfs_base)

    with CPUCtl.open(sysfs_base=sysfs_base) as orig, CPUCtl.open(sysfs_base=copy_base) as copy:
        assert orig.cores() == copy.cores()
        for cpu in orig.cores():
            assert orig.get_core_info(cpu) == copy.get_core_info(cpu)

def test_load_errors():
    """Verify that bad datasets are rejected."""

    with pytest.raises(Error):
        EmulSysfs.load(io.StringIO("cpus: [0, 1]\n"))

    dataset = EmulSysfs.load(io.StringIO("description: empty\n"))
    assert dataset == {"description": "empty"}
