# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Tickmark API: materiality and audit sampling calculation service."""

__version__ = "0.1.0"
