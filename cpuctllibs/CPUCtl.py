# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide API for controlling CPUs: onlining and offlining, frequency and governor configuration.

Example:
    with CPUCtl.open() as cpuctl:
        for cpu in cpuctl.online():
            print(cpu, cpuctl.get_governor(cpu), cpuctl.get_frequency(cpu))
        cpuctl.disable_hyperthread(0)
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import os
import errno
import typing
from pathlib import Path
from typing import TypedDict
from cpuctllibs import _SysfsAttrs, _Topology
from cpuctllibs.helperlibs import Logging, ClassHelpers
from cpuctllibs.helperlibs.Exceptions import Error, AttributeNotFound, AttributeWriteError
from cpuctllibs.helperlibs.Exceptions import CoreNotFound, InvalidFrequency, LastCoreError
from cpuctllibs.helperlibs.Exceptions import NoSiblingFound, ProtectedCoreError, UnknownGovernor
from cpuctllibs.helperlibs.Exceptions import UnsupportedOperation

if typing.TYPE_CHECKING:
    from typing import Any, Final
    from cpuctllibs._SysfsAttrs import AttrNameType

_VERSION = "1.0.0"

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpuctl.{__name__}")

# The environment variable overriding the default CPU sysfs base directory.
SYSFS_BASE_ENVVAR: Final[str] = "CPUCTL_SYSFS_BASE"

# The value of the 'scaling_setspeed' file when the governor does not support setting the frequency.
_SETSPEED_UNSUPPORTED: Final[str] = "<unsupported>"

class CoreInfoTypedDict(TypedDict):
    """
    A summary of CPU state.

    Attributes:
        core: The CPU number.
        online: Whether the CPU is online.
        frequency: The current CPU frequency in kHz, 'None' if not available.
        governor: The CPU scaling governor name, 'None' if not available.
    """

    core: int
    online: bool
    frequency: int | None
    governor: str | None

def _validate_cpu(cpu: int):
    """
    Validate a CPU number.

    Args:
        cpu: The CPU number to validate.

    Raises:
        Error: If 'cpu' is not a non-negative integer.
    """

    if isinstance(cpu, bool) or not isinstance(cpu, int) or cpu < 0:
        raise Error(f"Bad CPU number '{cpu}': should be a non-negative integer")

def _validate_freq(freq: int):
    """
    Validate a frequency value.

    Args:
        freq: The frequency value in kHz.

    Raises:
        InvalidFrequency: If 'freq' is not a positive integer.
    """

    if isinstance(freq, bool) or not isinstance(freq, int) or freq <= 0:
        raise InvalidFrequency(f"Bad frequency value '{freq}': should be a positive integer "
                               f"amount of kHz", value=str(freq))

def _resolve_sysfs_base(sysfs_base: Path | str | None) -> Path:
    """
    Return the CPU sysfs base directory to use.

    Args:
        sysfs_base: The user-provided path, takes precedence if not 'None'.

    Returns:
        'sysfs_base' if provided, otherwise the value of the 'CPUCTL_SYSFS_BASE' environment
        variable if set, otherwise '/sys/devices/system/cpu'.
    """

    if sysfs_base is not None:
        return Path(sysfs_base)

    envval = os.environ.get(SYSFS_BASE_ENVVAR)
    if envval:
        _LOG.debug("Using CPU sysfs base directory '%s' from the '%s' environment variable",
                   envval, SYSFS_BASE_ENVVAR)
        return Path(envval)

    return _SysfsAttrs.SYSFS_BASE

class CPUCtl(ClassHelpers.SimpleCloseContext):
    """
    Provide API for controlling CPUs: onlining and offlining, frequency and governor configuration.

    Public methods overview.

    1. Discovery.
        * 'cores()' - all CPUs.
        * 'online()', 'online_cores()' - online CPUs.
        * 'offline_cores()' - offline CPUs.
        * 'is_online()' - check if a CPU is online.
    2. Onlining and offlining.
        * 'enable()', 'enable_all()' - online CPUs.
        * 'disable()', 'disable_all()' - offline CPUs.
        * 'disable_hyperthread()' - offline hyperthread siblings of a CPU.
    3. Frequency.
        * 'get_frequency()', 'set_frequency()', 'get_frequencies()', 'set_frequency_all()'.
        * 'get_min_frequency()', 'set_min_frequency()'.
        * 'get_max_frequency()', 'set_max_frequency()'.
        * 'get_available_frequencies()'.
    4. Governor.
        * 'get_governor()', 'set_governor()', 'get_governors()', 'set_governor_all()'.
        * 'get_available_governors()'.
    5. Misc.
        * 'get_core_info()' - summary of CPU state.

    Nothing is cached, every method reads or writes sysfs. No locking is done, so concurrent
    changes by other processes or the kernel (e.g., CPU hotplug) are seen as they happen.
    """

    def __init__(self, sysfs_base: Path | str | None = None):
        """
        Initialize a class instance.

        Args:
            sysfs_base: The CPU sysfs base directory. If not provided, the 'CPUCTL_SYSFS_BASE'
                        environment variable is used, and if it is not set,
                        '/sys/devices/system/cpu' is used.

        Raises:
            DiscoveryError: If the CPU sysfs base directory does not exist or cannot be read.
        """

        self.sysfs_base = _resolve_sysfs_base(sysfs_base)

        self._attrs = _SysfsAttrs.SysfsAttrs(sysfs_base=self.sysfs_base)
        self._topology = _Topology.Topology(attrs=self._attrs)

        self._topology.verify()

    def close(self):
        """Uninitialize the class object."""

        ClassHelpers.close(self, close_attrs=("_topology", "_attrs"))

    def cores(self) -> list[int]:
        """
        Return all CPU numbers, online and offline, sorted in ascending order.

        Returns:
            List of CPU numbers.
        """

        return self._topology.list_cores()

    def online(self) -> list[int]:
        """
        Return online CPU numbers sorted in ascending order.

        Returns:
            List of online CPU numbers.
        """

        return self._topology.list_online()

    def online_cores(self) -> list[int]:
        """Same as 'online()'."""

        return self.online()

    def offline_cores(self) -> list[int]:
        """
        Return offline CPU numbers sorted in ascending order.

        Returns:
            List of offline CPU numbers.
        """

        return self._topology.list_offline()

    def is_online(self, cpu: int) -> bool:
        """
        Check if a CPU is online.

        Args:
            cpu: The CPU number to check.

        Returns:
            True if the CPU is online, False otherwise.

        Raises:
            CoreNotFound: If the CPU does not exist.
        """

        _validate_cpu(cpu)
        return self._topology.is_online(cpu)

    def enable(self, cpu: int):
        """
        Bring a CPU online. Do nothing if it is already online.

        Args:
            cpu: The CPU number to online.

        Raises:
            CoreNotFound: If the CPU does not exist.
            AttributeWriteError: If the kernel refused to online the CPU.
        """

        _validate_cpu(cpu)

        if self._topology.is_online(cpu):
            _LOG.debug("CPU%d is already online, skipping", cpu)
            return

        _LOG.debug("Onlining CPU%d", cpu)
        self._attrs.write(cpu, "online", True)

    def _is_protected(self, cpu: int) -> bool:
        """
        Check if a CPU cannot be offlined.

        Args:
            cpu: The CPU number to check.

        Returns:
            True if the CPU is CPU 0 or does not have the 'online' sysfs file.
        """

        if cpu == 0:
            return True

        return not self._attrs.get_path(cpu, "online").exists()

    def disable(self, cpu: int):
        """
        Take a CPU offline. Do nothing if it is already offline.

        Args:
            cpu: The CPU number to offline.

        Raises:
            ProtectedCoreError: If 'cpu' is CPU 0 or does not support offlining.
            LastCoreError: If 'cpu' is the last online CPU.
            CoreNotFound: If the CPU does not exist.
            AttributeWriteError: If the kernel refused to offline the CPU.
        """

        _validate_cpu(cpu)

        if cpu == 0:
            raise ProtectedCoreError("CPU0 cannot be taken offline")

        try:
            online = self._attrs.read(cpu, "online")
        except CoreNotFound:
            raise
        except AttributeNotFound as err:
            raise ProtectedCoreError(f"CPU{cpu} cannot be taken offline: it does not support "
                                     f"onlining/offlining:\n{err.indent(2)}") from err

        if not online:
            _LOG.debug("CPU%d is already offline, skipping", cpu)
            return

        others = set(self._topology.list_online()) - {cpu}
        if not others:
            raise LastCoreError(f"CPU{cpu} cannot be taken offline: it is the last online CPU")

        _LOG.debug("Offlining CPU%d", cpu)
        try:
            self._attrs.write(cpu, "online", False)
        except AttributeWriteError as err:
            if err.errno == errno.EBUSY:
                raise LastCoreError(f"The kernel refused to take CPU{cpu} offline, it is probably "
                                    f"the last online CPU:\n{err.indent(2)}") from err
            raise

    def disable_hyperthread(self, cpu: int) -> list[int]:
        """
        Take the hyperthread siblings of a CPU offline. The CPU itself stays online.

        Args:
            cpu: The CPU number whose siblings should be offlined.

        Returns:
            The list of CPU numbers that were offlined (or already were offline).

        Raises:
            NoSiblingFound: If 'cpu' has no hyperthread siblings.
            AttributeNotFound: If the kernel does not provide topology information for 'cpu'.
            ProtectedCoreError, LastCoreError: See 'disable()'.
        """

        _validate_cpu(cpu)

        siblings = [sibling for sibling in self._topology.get_siblings(cpu) if sibling != cpu]
        if not siblings:
            raise NoSiblingFound(f"CPU{cpu} has no hyperthread siblings")

        for sibling in siblings:
            self.disable(sibling)

        return siblings

    def enable_all(self) -> list[int]:
        """
        Bring all offline CPUs online.

        Returns:
            The list of CPU numbers that were onlined.
        """

        cpus = self._topology.list_offline()
        for cpu in cpus:
            self.enable(cpu)

        return cpus

    def disable_all(self) -> list[int]:
        """
        Take all online CPUs offline, except for those that cannot be offlined. If all online CPUs
        can be offlined, the first one stays online.

        Returns:
            The list of CPU numbers that were offlined.
        """

        online = self._topology.list_online()
        cpus = [cpu for cpu in online if not self._is_protected(cpu)]
        if cpus and len(cpus) == len(online):
            cpus = cpus[1:]

        for cpu in cpus:
            self.disable(cpu)

        return cpus

    def _write_freq(self, cpu: int, name: AttrNameType, freq: int):
        """
        Write a frequency attribute and translate the errors.

        Args:
            cpu: The CPU number.
            name: The frequency attribute name.
            freq: The frequency value in kHz.
        """

        _validate_cpu(cpu)
        _validate_freq(freq)

        try:
            self._attrs.write(cpu, name, freq)
        except CoreNotFound:
            raise
        except AttributeNotFound as err:
            raise UnsupportedOperation(f"Cannot set frequency of CPU{cpu}:\n"
                                       f"{err.indent(2)}") from err
        except AttributeWriteError as err:
            if err.errno in (errno.EINVAL, errno.ERANGE):
                raise InvalidFrequency(f"The kernel rejected frequency {freq} kHz for "
                                       f"CPU{cpu}:\n{err.indent(2)}",
                                       errno=err.errno, path=err.path, value=err.value) from err
            raise

    def get_frequency(self, cpu: int) -> int:
        """
        Return the current frequency of a CPU.

        Args:
            cpu: The CPU number.

        Returns:
            The current frequency in kHz.

        Raises:
            AttributeNotFound: If the CPU does not expose the current frequency.
        """

        _validate_cpu(cpu)
        return self._attrs.read(cpu, "cur_freq")

    def set_frequency(self, cpu: int, freq: int):
        """
        Request a CPU to run at a specific frequency. Only governors supporting direct frequency
        requests (e.g., "userspace") allow for this.

        Args:
            cpu: The CPU number.
            freq: The frequency in kHz.

        Raises:
            UnsupportedOperation: If the frequency cannot be set directly for the CPU.
            InvalidFrequency: If 'freq' is not a positive integer or was rejected by the kernel.
            AttributeWriteError: If the write failed for another reason (e.g., permissions).
        """

        _validate_cpu(cpu)
        _validate_freq(freq)

        try:
            setspeed = self._attrs.read(cpu, "setspeed")
        except CoreNotFound:
            raise
        except AttributeNotFound as err:
            raise UnsupportedOperation(f"Cannot set frequency of CPU{cpu}:\n"
                                       f"{err.indent(2)}") from err

        if setspeed == _SETSPEED_UNSUPPORTED:
            governor = self._read_optional(cpu, "governor")
            raise UnsupportedOperation(f"Cannot set frequency of CPU{cpu}: the '{governor}' "
                                       f"governor does not support setting the frequency",
                                       governor=governor)

        self._write_freq(cpu, "setspeed", freq)

    def get_min_frequency(self, cpu: int) -> int:
        """
        Return the minimum frequency the governor may select for a CPU.

        Args:
            cpu: The CPU number.

        Returns:
            The minimum frequency in kHz.
        """

        _validate_cpu(cpu)
        return self._attrs.read(cpu, "min_freq")

    def set_min_frequency(self, cpu: int, freq: int):
        """
        Set the minimum frequency the governor may select for a CPU.

        Args:
            cpu: The CPU number.
            freq: The frequency in kHz.

        Raises:
            UnsupportedOperation: If the CPU does not support changing the minimum frequency.
            InvalidFrequency: If 'freq' is not a positive integer or was rejected by the kernel.
        """

        self._write_freq(cpu, "min_freq", freq)

    def get_max_frequency(self, cpu: int) -> int:
        """
        Return the maximum frequency the governor may select for a CPU.

        Args:
            cpu: The CPU number.

        Returns:
            The maximum frequency in kHz.
        """

        _validate_cpu(cpu)
        return self._attrs.read(cpu, "max_freq")

    def set_max_frequency(self, cpu: int, freq: int):
        """
        Set the maximum frequency the governor may select for a CPU.

        Args:
            cpu: The CPU number.
            freq: The frequency in kHz.

        Raises:
            UnsupportedOperation: If the CPU does not support changing the maximum frequency.
            InvalidFrequency: If 'freq' is not a positive integer or was rejected by the kernel.
        """

        self._write_freq(cpu, "max_freq", freq)

    def get_available_frequencies(self, cpu: int) -> list[int]:
        """
        Return the list of frequencies the CPU supports. Only some cpufreq drivers provide it.

        Args:
            cpu: The CPU number.

        Returns:
            List of frequencies in kHz.
        """

        _validate_cpu(cpu)
        return self._attrs.read(cpu, "available_frequencies")

    def get_frequencies(self) -> dict[int, int]:
        """
        Return the current frequency of every online CPU.

        Returns:
            A dictionary mapping CPU numbers to frequencies in kHz.
        """

        return {cpu: self.get_frequency(cpu) for cpu in self.online()}

    def set_frequency_all(self, freq: int):
        """
        Request every online CPU to run at a specific frequency. Stop at the first failure.

        Args:
            freq: The frequency in kHz.
        """

        for cpu in self.online():
            self.set_frequency(cpu, freq)

    def get_governor(self, cpu: int) -> str:
        """
        Return the scaling governor of a CPU.

        Args:
            cpu: The CPU number.

        Returns:
            The governor name.

        Raises:
            AttributeNotFound: If the CPU does not expose the governor.
        """

        _validate_cpu(cpu)
        return self._attrs.read(cpu, "governor")

    def get_available_governors(self, cpu: int) -> list[str]:
        """
        Return the scaling governors available for a CPU.

        Args:
            cpu: The CPU number.

        Returns:
            List of governor names.
        """

        _validate_cpu(cpu)
        return self._attrs.read(cpu, "available_governors")

    def set_governor(self, cpu: int, governor: str):
        """
        Set the scaling governor of a CPU.

        Args:
            cpu: The CPU number.
            governor: Name of the governor to set.

        Raises:
            UnknownGovernor: If 'governor' is not available for the CPU.
            AttributeNotFound: If the CPU does not expose the governor.
        """

        available = self.get_available_governors(cpu)
        if governor not in available:
            raise UnknownGovernor(f"Bad governor name '{governor}' for CPU{cpu}, use one of: "
                                  f"{', '.join(available)}", governor=governor,
                                  available=available)

        _LOG.debug("Setting CPU%d governor to '%s'", cpu, governor)
        self._attrs.write(cpu, "governor", governor)

    def get_governors(self) -> dict[int, str]:
        """
        Return the scaling governor of every online CPU.

        Returns:
            A dictionary mapping CPU numbers to governor names.
        """

        return {cpu: self.get_governor(cpu) for cpu in self.online()}

    def set_governor_all(self, governor: str):
        """
        Set the scaling governor of every online CPU. Stop at the first failure.

        Args:
            governor: Name of the governor to set.
        """

        for cpu in self.online():
            self.set_governor(cpu, governor)

    def _read_optional(self, cpu: int, name: AttrNameType) -> Any:
        """Read a CPU attribute, return 'None' if the CPU does not have it."""

        try:
            return self._attrs.read(cpu, name)
        except CoreNotFound:
            raise
        except AttributeNotFound:
            return None

    def get_core_info(self, cpu: int) -> CoreInfoTypedDict:
        """
        Return a summary of CPU state.

        Args:
            cpu: The CPU number.

        Returns:
            A 'CoreInfoTypedDict' dictionary. Attributes the CPU does not expose are 'None'.

        Raises:
            CoreNotFound: If the CPU does not exist.
        """

        _validate_cpu(cpu)

        return {"core": cpu,
                "online": self._topology.is_online(cpu),
                "frequency": self._read_optional(cpu, "cur_freq"),
                "governor": self._read_optional(cpu, "governor")}

def open(sysfs_base: Path | str | None = None) -> CPUCtl: # pylint: disable=redefined-builtin
    """
    Discover the CPUs and return a 'CPUCtl' object for controlling them.

    Args:
        sysfs_base: The CPU sysfs base directory, see 'CPUCtl.__init__()'.

    Returns:
        A 'CPUCtl' object.

    Raises:
        DiscoveryError: If the CPU sysfs base directory does not exist or cannot be read.
    """

    return CPUCtl(sysfs_base=sysfs_base)
