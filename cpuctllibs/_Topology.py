# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide API for discovering CPUs and their online status and hyperthread siblings.

The CPU topology is never cached, because CPUs may be onlined and offlined at any moment. Every
method reads the current state from sysfs.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import os
import re
from pathlib import Path
from cpuctllibs import _SysfsAttrs
from cpuctllibs.helperlibs import Logging, ClassHelpers
from cpuctllibs.helperlibs.Exceptions import DiscoveryError, AttributeNotFound, CoreNotFound

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpuctl.{__name__}")

_CPU_DIR_REGEX = re.compile(r"^cpu([0-9]+)$")

class Topology(ClassHelpers.SimpleCloseContext):
    """
    Provide API for discovering CPUs and their online status and hyperthread siblings.

    Public methods overview.

    1. Discovery.
        * 'verify()' - verify that the CPU sysfs base directory can be used.
        * 'list_cores()' - all CPUs, online and offline.
        * 'list_online()' - online CPUs.
        * 'list_offline()' - offline CPUs.
    2. Per-CPU information.
        * 'is_online()' - check whether a CPU is online.
        * 'get_siblings()' - return hyperthread siblings of a CPU.
    """

    def __init__(self, sysfs_base: Path | str = _SysfsAttrs.SYSFS_BASE,
                 attrs: _SysfsAttrs.SysfsAttrs | None = None):
        """
        Initialize a class instance.

        Args:
            sysfs_base: The CPU sysfs base directory. Ignored if 'attrs' is provided.
            attrs: The 'SysfsAttrs' object to use for reading CPU attributes. If not provided, a
                   new instance is created.
        """

        self._close_attrs = attrs is None

        if not attrs:
            attrs = _SysfsAttrs.SysfsAttrs(sysfs_base=sysfs_base)

        self._attrs = attrs
        self.sysfs_base = attrs.sysfs_base

    def close(self):
        """Uninitialize the class object."""

        ClassHelpers.close(self, close_attrs=("_attrs",))

    def verify(self):
        """
        Verify that the CPU sysfs base directory exists and is readable.

        Raises:
            DiscoveryError: If the directory does not exist, is not a directory, or is not readable.
        """

        if not self.sysfs_base.exists():
            raise DiscoveryError(f"CPU sysfs directory '{self.sysfs_base}' does not exist",
                                 path=self.sysfs_base)
        if not self.sysfs_base.is_dir():
            raise DiscoveryError(f"CPU sysfs path '{self.sysfs_base}' is not a directory",
                                 path=self.sysfs_base)
        if not os.access(self.sysfs_base, os.R_OK | os.X_OK):
            raise DiscoveryError(f"CPU sysfs directory '{self.sysfs_base}' is not readable",
                                 path=self.sysfs_base)

    def list_cores(self) -> list[int]:
        """
        Return all CPU numbers, online and offline, sorted in ascending order.

        Only the 'cpu<N>' sub-directories of the sysfs base directory are taken into account, other
        entries (e.g., 'cpufreq' or 'cpuidle') are skipped. An empty list is returned if there are
        no CPU sub-directories.

        Returns:
            List of CPU numbers.

        Raises:
            DiscoveryError: If the sysfs base directory does not exist or cannot be listed.
        """

        try:
            entries = list(os.scandir(self.sysfs_base))
        except OSError as err:
            raise DiscoveryError(f"Failed to list CPU sysfs directory '{self.sysfs_base}':\n"
                                 f"  {err}", path=self.sysfs_base) from err

        cpus = []
        for entry in entries:
            mobj = _CPU_DIR_REGEX.match(entry.name)
            if not mobj:
                continue

            try:
                if not entry.is_dir():
                    continue
            except OSError as err:
                # The entry disappeared or cannot be accessed, treat it as non-existing.
                _LOG.debug("Skipping '%s': %s", entry.path, err)
                continue

            cpus.append(int(mobj.group(1)))

        return sorted(cpus)

    def is_online(self, cpu: int) -> bool:
        """
        Check if a CPU is online.

        Args:
            cpu: The CPU number to check.

        Returns:
            True if the CPU is online, False otherwise.

        Raises:
            CoreNotFound: If the CPU does not exist.

        Notes:
            CPUs that cannot be offlined do not have the 'online' file, they are always online.
        """

        try:
            return bool(self._attrs.read(cpu, "online"))
        except CoreNotFound:
            raise
        except AttributeNotFound:
            return True

    def list_online(self) -> list[int]:
        """
        Return online CPU numbers sorted in ascending order.

        Returns:
            List of online CPU numbers.
        """

        cpus = []
        for cpu in self.list_cores():
            try:
                if self.is_online(cpu):
                    cpus.append(cpu)
            except CoreNotFound:
                _LOG.debug("CPU%d disappeared while listing online CPUs", cpu)

        return cpus

    def list_offline(self) -> list[int]:
        """
        Return offline CPU numbers sorted in ascending order.

        Returns:
            List of offline CPU numbers.
        """

        cpus = []
        for cpu in self.list_cores():
            try:
                if not self.is_online(cpu):
                    cpus.append(cpu)
            except CoreNotFound:
                _LOG.debug("CPU%d disappeared while listing offline CPUs", cpu)

        return cpus

    def get_siblings(self, cpu: int) -> list[int]:
        """
        Return the hyperthread siblings of a CPU: the CPUs sharing the same physical core, according
        to the kernel. The result includes 'cpu' itself.

        Args:
            cpu: The CPU number to return the siblings for.

        Returns:
            Sorted list of CPU numbers.

        Raises:
            AttributeNotFound: If the kernel does not provide topology information for the CPU
                               (e.g., the CPU is offline).
        """

        siblings = self._attrs.read(cpu, "thread_siblings_list")
        _LOG.debug("CPU%d hyperthread siblings: %s", cpu, siblings)
        return siblings
