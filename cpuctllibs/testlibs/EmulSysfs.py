# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2022-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Fabricate a CPU sysfs hierarchy in a directory from a dataset. This allows for testing the code
using 'CPUCtl' without touching the real sysfs.

A dataset is a dictionary, usually loaded from a YAML file. Example:

    description: Two cores with two hyperthreads each.
    cpufreq:
      scaling_cur_freq: 2400000
      scaling_governor: powersave
      scaling_available_governors: [performance, powersave]
    cpus:
      0: {online: 1, thread_siblings_list: "0-1"}
      1: {online: 1, thread_siblings_list: "0-1", cpufreq: {scaling_cur_freq: 800000}}
      2: {online: 0, thread_siblings_list: [2, 3], cpufreq: null}
      3: {thread_siblings_list: "2-3"}
    extra_dirs: [cpufreq, cpuidle]

The top-level 'cpufreq' dictionary describes the 'cpufreq/' files every CPU gets. A per-CPU
'cpufreq' dictionary overrides them ('null' values drop files), and 'cpufreq: null' drops the
'cpufreq/' directory altogether. CPUs without the 'online' key get no 'online' file. Lists are
written space-separated, except for 'thread_siblings_list', which is written in the kernel CPU list
format.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path
from typing import Any, TypedDict
from cpuctllibs import _SysfsAttrs, _Topology
from cpuctllibs.helperlibs import Logging, Trivial, YAML
from cpuctllibs.helperlibs.Exceptions import Error, AttributeNotFound

if typing.TYPE_CHECKING:
    from typing import IO

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpuctl.{__name__}")

class CPUDatasetTypedDict(TypedDict, total=False):
    """
    Description of a single CPU in a dataset.

    Attributes:
        online: Contents of the 'online' file. No file if 'None' or missing.
        thread_siblings_list: Contents of the 'topology/thread_siblings_list' file, a string or a
                              list of CPU numbers. No file if 'None' or missing.
        cpufreq: Overrides for the default 'cpufreq/' files. No 'cpufreq/' directory if 'None'.
    """

    online: int | bool | None
    thread_siblings_list: str | int | list[int] | None
    cpufreq: dict[str, Any] | None

class DatasetTypedDict(TypedDict, total=False):
    """
    A dataset describing a CPU sysfs hierarchy.

    Attributes:
        description: A human-readable description of the dataset.
        cpufreq: The default 'cpufreq/' files of every CPU.
        cpus: Per-CPU descriptions, indexed by CPU number.
        extra_dirs: Names of non-CPU sub-directories to create in the base directory.
    """

    description: str
    cpufreq: dict[str, Any]
    cpus: dict[int, CPUDatasetTypedDict]
    extra_dirs: list[str]

def _format_value(val: Any) -> str:
    """Format a dataset value the way sysfs files present it."""

    if isinstance(val, bool):
        return "1" if val else "0"
    if isinstance(val, (list, tuple)):
        return " ".join(str(elt) for elt in val)
    return str(val)

def _write_file(path: Path, val: str):
    """Create file 'path' containing 'val' and the trailing newline."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{val}\n", encoding="utf-8")
    except OSError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"Failed to create file '{path}':\n{msg}") from err

def _populate_cpu(cpupath: Path, info: CPUDatasetTypedDict, cpufreq: dict[str, Any]):
    """
    Create the sysfs files of a single CPU.

    Args:
        cpupath: Path to the 'cpu<N>' directory to create.
        info: The CPU description.
        cpufreq: The default 'cpufreq/' files.
    """

    cpupath.mkdir(parents=True, exist_ok=True)

    online = info.get("online")
    if online is not None:
        _write_file(cpupath / "online", _format_value(online))

    siblings = info.get("thread_siblings_list")
    if siblings is not None:
        if isinstance(siblings, (list, tuple)):
            siblings = Trivial.rangify(siblings)
        _write_file(cpupath / "topology" / "thread_siblings_list", str(siblings))

    if "cpufreq" in info and info["cpufreq"] is None:
        return

    files = dict(cpufreq)
    files.update(info.get("cpufreq") or {})
    for name, val in files.items():
        if val is None:
            continue
        _write_file(cpupath / "cpufreq" / name, _format_value(val))

def populate(basepath: Path | str, dataset: DatasetTypedDict) -> Path:
    """
    Fabricate a CPU sysfs hierarchy.

    Args:
        basepath: The directory to create the hierarchy in. It becomes the CPU sysfs base directory,
                  the one containing the 'cpu<N>' sub-directories.
        dataset: The dataset describing the hierarchy.

    Returns:
        The base directory path.
    """

    basepath = Path(basepath)
    basepath.mkdir(parents=True, exist_ok=True)

    cpufreq = dataset.get("cpufreq") or {}
    for cpu, info in (dataset.get("cpus") or {}).items():
        cpu = Trivial.str_to_int(cpu, base=10, what="CPU number")
        _populate_cpu(basepath / f"cpu{cpu}", info or {}, cpufreq)

    for name in dataset.get("extra_dirs") or []:
        (basepath / name).mkdir(parents=True, exist_ok=True)

    _LOG.debug("Populated emulated CPU sysfs at '%s'", basepath)
    return basepath

def load(path: Path | str | IO[str]) -> DatasetTypedDict:
    """
    Load a dataset from a YAML file.

    Args:
        path: Path to the YAML file or a file-like object.

    Returns:
        The loaded dataset.
    """

    dataset = YAML.load(path)

    cpus = dataset.get("cpus")
    if cpus is not None and not isinstance(cpus, dict):
        raise Error(f"Bad dataset '{path}': 'cpus' must be a dictionary indexed by CPU number")

    return typing.cast(DatasetTypedDict, dataset)

def dump(dataset: DatasetTypedDict, path: Path | str | IO[str]):
    """
    Save a dataset to a YAML file.

    Args:
        dataset: The dataset to save.
        path: Path to the YAML file or a file-like object.
    """

    if isinstance(path, str):
        path = Path(path)

    YAML.dump(dict(dataset), path)

def collect(sysfs_base: Path | str = _SysfsAttrs.SYSFS_BASE,
            description: str = "") -> DatasetTypedDict:
    """
    Collect a dataset from an existing CPU sysfs hierarchy, e.g., from the real system.

    Only the files 'CPUCtl' uses are collected. Files the kernel does not provide for a CPU are
    omitted from the dataset.

    Args:
        sysfs_base: The CPU sysfs base directory to collect the dataset from.
        description: The dataset description.

    Returns:
        The collected dataset.
    """

    cpus: dict[int, CPUDatasetTypedDict] = {}
    dataset: DatasetTypedDict = {"description": description, "cpus": cpus}

    with _SysfsAttrs.SysfsAttrs(sysfs_base=sysfs_base) as attrs, \
         _Topology.Topology(attrs=attrs) as topology:
        topology.verify()

        for cpu in topology.list_cores():
            info: CPUDatasetTypedDict = {}
            cpufreq: dict[str, Any] = {}

            for name, attrinfo in _SysfsAttrs.ATTRS.items():
                try:
                    val = attrs.read_attribute(cpu, name)
                except AttributeNotFound:
                    continue

                path = attrinfo["path"]
                if path.startswith("cpufreq/"):
                    cpufreq[path[len("cpufreq/"):]] = val
                elif name == "online":
                    info["online"] = Trivial.str_to_int(val, base=10, what="online status")
                elif name == "thread_siblings_list":
                    info["thread_siblings_list"] = val

            info["cpufreq"] = cpufreq or None
            cpus[cpu] = info

    _LOG.debug("Collected emulation dataset for %d CPUs from '%s'", len(cpus), sysfs_base)
    return dataset
