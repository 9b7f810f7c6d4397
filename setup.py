#!/usr/bin/python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""The standard python packaging script."""

import re
from setuptools import setup, find_packages

def get_version(filename):
    """Fetch the project version number."""

    with open(filename, "r", encoding="utf-8") as fobj:
        for line in fobj:
            matchobj = re.match(r'^_VERSION = "(\d+.\d+.\d+)"$', line)
            if matchobj:
                return matchobj.group(1)
    return None

setup(
    name="cpuctl",
    description="""Linux CPU online status, frequency, and governor control library""",
    python_requires=">=3.9",
    version=get_version("cpuctllibs/CPUCtl.py"),
    packages=find_packages(exclude=["test*"]),
    long_description="""A library for discovering CPUs and controlling their online status,
                        frequency, and scaling governor via the Linux sysfs interface.""",
    install_requires=["pyyaml", "colorama"],
    extras_require={"test": ["pytest"]},
    classifiers=[
        "Intended Audience :: Developers",
        "Topic :: System :: Hardware",
        "Topic :: System :: Operating System Kernels :: Linux",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python :: 3 :: Only",
        "Development Status :: 4 - Beta",
    ],
)
