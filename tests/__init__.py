# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Longview test suite.

Unit tests cover each package in isolation; integration tests run the
full period chain.
"""
