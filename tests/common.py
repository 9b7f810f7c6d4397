#!/usr/bin/env python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Common functions for cpuctl tests."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import os
import builtins
import contextlib
from pathlib import Path
from typing import Generator
from unittest.mock import patch
from cpuctllibs import CPUCtl
from cpuctllibs.testlibs import EmulSysfs

def get_dataset_path(dataset: str) -> Path:
    """
    Get the path to the YAML file of a dataset.

    Args:
        dataset: Name of the dataset.

    Returns:
        Path to the dataset YAML file.
    """

    return Path(__file__).parent.resolve() / "data" / f"{dataset}.yaml"

def get_datasets() -> Generator[str, None, None]:
    """Yield names of all datasets in the 'data' directory."""

    basepath = Path(__file__).parent.resolve() / "data"
    for path in sorted(basepath.glob("*.yaml")):
        yield path.stem

def build_sysfs(basepath: Path, dataset: str) -> Path:
    """
    Fabricate a CPU sysfs hierarchy from a dataset.

    Args:
        basepath: The directory to fabricate the hierarchy in.
        dataset: Name of the dataset.

    Returns:
        The CPU sysfs base directory path.
    """

    return EmulSysfs.populate(basepath / "cpu", EmulSysfs.load(get_dataset_path(dataset)))

def get_cpuctl(basepath: Path, dataset: str) -> CPUCtl.CPUCtl:
    """
    Fabricate a CPU sysfs hierarchy from a dataset and create a 'CPUCtl' object for it.

    Args:
        basepath: The directory to fabricate the hierarchy in.
        dataset: Name of the dataset.

    Returns:
        A 'CPUCtl' object.
    """

    return CPUCtl.open(sysfs_base=build_sysfs(basepath, dataset))

def read_file(sysfs_base: Path, cpu: int, relpath: str) -> str | None:
    """
    Read a CPU sysfs file directly, bypassing the library.

    Args:
        sysfs_base: The CPU sysfs base directory.
        cpu: The CPU number.
        relpath: Path to the file relative to the 'cpu<N>' directory.

    Returns:
        The stripped file contents, or 'None' if the file does not exist.
    """

    path = sysfs_base / f"cpu{cpu}" / relpath
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8").strip()

def is_online(sysfs_base: Path, cpu: int) -> bool:
    """Check whether a CPU is online by reading the 'online' file directly."""

    return read_file(sysfs_base, cpu, "online") in (None, "1")

@contextlib.contextmanager
def inject_write_error(path: Path, errnum: int) -> Generator[None, None, None]:
    """
    Make opening file 'path' for writing fail with the 'errnum' error number, the way the kernel
    fails writes of values it rejects.

    Args:
        path: The file path to fail writes for.
        errnum: The error number.
    """

    real_open = os.open

    def _fake_open(fpath, flags, *args, **kwargs):
        """Fail for 'path' opened for writing, call the real 'os.open()' otherwise."""

        if Path(fpath) == path and flags & (os.O_WRONLY | os.O_RDWR):
            raise OSError(errnum, os.strerror(errnum), str(fpath))
        return real_open(fpath, flags, *args, **kwargs)

    with patch("os.open", side_effect=_fake_open):
        yield

@contextlib.contextmanager
def inject_read_error(path: Path, errnum: int) -> Generator[None, None, None]:
    """
    Make opening file 'path' for reading fail with the 'errnum' error number.

    Args:
        path: The file path to fail reads for.
        errnum: The error number.
    """

    real_open = builtins.open

    def _fake_open(fpath, *args, **kwargs):
        """Fail for 'path', call the real 'open()' otherwise."""

        if isinstance(fpath, (str, Path)) and Path(fpath) == path:
            raise OSError(errnum, os.strerror(errnum), str(fpath))
        return real_open(fpath, *args, **kwargs)

    with patch("builtins.open", side_effect=_fake_open):
        yield
