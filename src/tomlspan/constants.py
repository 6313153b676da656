#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/constants.py
"""Constants shared across tomlspan modules."""

from __future__ import annotations

import re

# Input decoding
DEFAULT_ENCODING = "utf-8"

# Parser limits
DEFAULT_MAX_NESTING_DEPTH = 64
DEFAULT_VALIDATE = True

# Rendering defaults for nodes created programmatically
DEFAULT_NEWLINE = "\n"
DEFAULT_TABLE_SEPARATOR = "\n"

# Position of the root table; header tables are numbered from 1
ROOT_TABLE_POSITION = 0

# Environment variables read by the CLI use this prefix
ENV_PREFIX = "TOMLSPAN_"

# Grammar character classes
WHITESPACE_CHARS = " \t"
BARE_KEY_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
# Characters that may appear in numbers, booleans and date-times
SCALAR_TOKEN_PATTERN = re.compile(r"[0-9A-Za-z_+\-.:]+")
LOCAL_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
TIME_AFTER_SPACE_PATTERN = re.compile(r" \d{2}:\d{2}")
TOMLLIB_POSITION_PATTERN = re.compile(r"\(at line (\d+), column (\d+)\)")
