#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/utils/__init__.py
"""Utility helpers for tomlspan."""
