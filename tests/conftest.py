#!/usr/bin/env python
#
# Copyright (C) 2022-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si

"""This configuration file adds the custom '--dataset' option for the tests."""

import pytest
import common

def pytest_addoption(parser):
    """Add custom pytest options."""

    text = """This option specifies the dataset to use for the tests that run against every dataset.
              By default, all datasets are used. Please, find the available datasets in the
              "data" subdirectory."""
    parser.addoption("-D", "--dataset", dest="dataset", default="all", help=text)

def pytest_generate_tests(metafunc):
    """Run the tests that take the 'dataset' argument for every dataset."""

    if "dataset" not in metafunc.fixturenames:
        return

    dataset = metafunc.config.getoption("dataset")
    if dataset == "all":
        params = list(common.get_datasets())
    else:
        params = [dataset]

    metafunc.parametrize("dataset", params)

def pytest_configure(config):
    """Verify the existence of requested dataset."""

    dataset = config.getoption("dataset")
    if dataset != "all" and not common.get_dataset_path(dataset).exists():
        raise pytest.exit(f"Did not find dataset '{dataset}'.")
