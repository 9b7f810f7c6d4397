#!/usr/bin/env python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Test the 'Logging' helpers module."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import io
from pathlib import Path
import colorama
import common
from cpuctllibs.helperlibs import Logging

def test_configure():
    """Test that messages go to the right streams with the right prefixes."""

    info_stream = io.StringIO()
    error_stream = io.StringIO()

    log = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.test-configure")
    assert isinstance(log, Logging.Logger)

    log.configure(prefix="cpuctl", info_stream=info_stream, error_stream=error_stream)
    log.propagate = False

    log.info("plain message")
    log.warning("warning %d", 1)
    log.debug("hidden debug message")

    assert info_stream.getvalue() == "plain message\n"
    errors = error_stream.getvalue()
    assert "cpuctl: warning: warning 1\n" in errors
    assert "hidden" not in errors

    # Re-configuring replaces the handlers instead of adding more.
    error_stream = io.StringIO()
    log.configure(prefix="newpfx", info_stream=info_stream, error_stream=error_stream)
    log.error("error message")
    assert error_stream.getvalue() == "newpfx: error: error message\n"

def test_colors():
    """Test colored output."""

    info_stream = io.StringIO()
    error_stream = io.StringIO()

    log = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.test-colors")
    log.configure(colored=True, info_stream=info_stream, error_stream=error_stream)
    log.propagate = False

    log.warning("colored warning")
    assert colorama.Fore.YELLOW in error_stream.getvalue()
    assert colorama.Style.RESET_ALL in error_stream.getvalue()

    # StringIO is not a TTY, so there are no colors by default.
    error_stream = io.StringIO()
    log.configure(info_stream=info_stream, error_stream=error_stream)
    log.warning("plain warning")
    assert error_stream.getvalue() == "Warning: plain warning\n"

def test_library_debug_messages(tmp_path: Path):
    """
    Test that the library emits debug messages to the main logger once it is configured.

    Args:
        tmp_path: A temporary directory path (provided by the pytest framework).
    """

    error_stream = io.StringIO()

    log = Logging.getLogger(Logging.MAIN_LOGGER_NAME)
    log.configure(level=Logging.DEBUG, info_stream=io.StringIO(), error_stream=error_stream)
    log.propagate = False

    try:
        with common.get_cpuctl(tmp_path, "smt2-4cpus") as cpuctl:
            cpuctl.disable(2)
    finally:
        log.handlers = []
        log.setLevel(Logging.WARNING)
        log.propagate = True

    assert "Offlining CPU2" in error_stream.getvalue()
