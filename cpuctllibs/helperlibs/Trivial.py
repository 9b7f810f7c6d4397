# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Common trivial helpers.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from itertools import groupby
from cpuctllibs.helperlibs.Exceptions import Error, ErrorBadFormat

if typing.TYPE_CHECKING:
    from typing import Iterable

def str_to_int(snum: str | int, base: int = 0, what: str = "") -> int:
    """
    Convert a string to an integer value.

    Args:
        snum: The value to convert to 'int'.
        base: Base of 'snum'. Defaults to auto-detect based on the prefix.
        what: A string describing the value to convert, for the possible error message.

    Returns:
        int: The converted integer value.

    Raises:
        ErrorBadFormat: If 'snum' cannot be converted to an integer.
    """

    try:
        num = int(str(snum), base)
    except (ValueError, TypeError):
        if not what:
            what = "value"

        if base != 0 and base < 2:
            raise Error(f"BUG: Bad base value {base} when converting bad {what} '{snum}': must be "
                        f"greater than 2 or 0") from None

        if base:
            errmsg = f"a base {base} integer"
        else:
            errmsg = "an integer"
        raise ErrorBadFormat(f"Bad {what} '{snum}': should be {errmsg}") from None

    return num

def list_dedup(elts: Iterable) -> list:
    """
    Return a list of unique elements in 'elts'.

    Args:
        elts: The list of elements.

    Returns:
        list: A list of unique elements.
    """

    return list(dict.fromkeys(elts))

def split_csv_line(csv_line: str, sep: str = ",", dedup: bool = False) -> list[str]:
    """
    Split a comma-separated values line and return the list of values. Empty values are dropped.

    Args:
        csv_line: The comma-separated line to split.
        sep: The separator character. Defaults to comma.
        dedup: If True, remove duplicated elements from the returned list.

    Returns:
        list: A list of values.
    """

    result = []
    for val in csv_line.strip(sep).split(sep):
        val = val.strip()
        if not val:
            continue
        result.append(val)

    if dedup:
        return list_dedup(result)
    return result

def split_csv_line_int(csv_line: str, sep: str = ",", dedup: bool = False, base: int = 0,
                       what: str = "") -> list[int]:
    """
    Split a comma-separated values line consisting of integers and integer ranges, return the list
    of integer values. This is the format the kernel uses for CPU lists in sysfs.

    Args:
        csv_line: The comma-separated line to split.
        sep: The separator character. Defaults to comma.
        dedup: If True, remove duplicated elements from the returned list.
        base: Base of the values in 'csv_line'. Defaults to auto-detect based on the prefix.
        what: A string describing the values in 'csv_line', for the possible error message.

    Returns:
        list: A list of integer values.

    Raises:
        ErrorBadFormat: If 'csv_line' cannot be converted to a list of integers.

    Example:
        Input: csv_line = "0,1-3,7"
        Output: [0, 1, 2, 3, 7].
    """

    vals = split_csv_line(csv_line, sep=sep)
    if not what:
        what = "value"

    result: list[int] = []
    for val in vals:
        if "-" not in val:
            result.append(str_to_int(val, base=base, what=what))
            continue

        range_vals = [range_val for range_val in val.split("-") if range_val]
        if len(range_vals) != 2:
            raise ErrorBadFormat(f"Bad {what} '{csv_line}': error in '{val}': should be two "
                                 f"integers separated by '-'")

        rvals = [str_to_int(rval, base=base, what=what) for rval in range_vals]
        if rvals[0] > rvals[1]:
            raise ErrorBadFormat(f"Bad {what} '{csv_line}': error in range '{val}': the first "
                                 f"number should be smaller than the second")

        result += range(rvals[0], rvals[1] + 1)

    if dedup:
        return list_dedup(result)
    return result

def rangify(numbers: Iterable[int | str]) -> str:
    """
    Convert a list of numbers into a comma-separated string of ranges. Consecutive numbers are
    represented as ranges (e.g., "0-2"), while non-consecutive numbers are listed individually.

    Args:
        numbers: List of numbers to convert, as integers or strings.

    Returns:
        A string representing the input numbers as comma-separated ranges.
    """

    try:
        numbers_int = [int(number) for number in numbers]
    except (ValueError, TypeError) as err:
        raise Error(f"failed to translate numbers to ranges, expected list of numbers, got "
                    f"'{numbers}'") from err

    range_strs = []
    numbers_int = sorted(numbers_int)
    for _, pairs in groupby(enumerate(numbers_int), lambda x:x[0]-x[1]):
        # The 'pairs' is an iterable of tuples (enumerate value, number). E.g. 'numbers_int'
        # [5,6,7,8,10,11,13] would result in three iterable groups:
        # ((0, 5), (1, 6), (2, 7), (3, 8)) , ((4, 10), (5, 11)) and  (6, 13)

        nums = [val for _, val in pairs]
        if len(nums) > 2:
            range_strs.append(f"{nums[0]}-{nums[-1]}")
        else:
            for num in nums:
                range_strs.append(str(num))

    return ",".join(range_strs)
