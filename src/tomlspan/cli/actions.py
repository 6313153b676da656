#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tomlspan/cli/actions.py
"""Custom argparse actions with environment variable defaults.

An option ``--log-level`` takes its default from ``TOMLSPAN_LOG_LEVEL`` when
that variable is set; flags such as ``--rich`` treat ``true``, ``1``,
``yes`` and ``on`` as set.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any, Optional

from tomlspan.constants import ENV_PREFIX

TRUTHY_VALUES = ("true", "1", "yes", "on")


def _dest_from_options(option_strings: list[str], dest: Optional[str]) -> Optional[str]:
    if dest:
        return dest
    for option in option_strings:
        if option.startswith("--"):
            return option[2:].replace("-", "_")
    return None


def env_key_for(dest: str) -> str:
    """Return the environment variable consulted for an option destination."""
    return f"{ENV_PREFIX}{dest.upper().replace('-', '_')}"


class EnvironmentAwareAction(argparse.Action):
    """Store action that takes its default from a ``TOMLSPAN_*`` variable."""

    def __init__(self, option_strings: list[str], dest: str, **kwargs: Any):
        name = _dest_from_options(option_strings, dest)
        if name:
            env_key = env_key_for(name)
            env_value = os.environ.get(env_key)
            if env_value is not None:
                converter = kwargs.get("type")
                try:
                    kwargs["default"] = converter(env_value) if converter is not None else env_value
                except (ValueError, TypeError) as e:
                    logging.warning("Invalid environment variable %s=%s: %s", env_key, env_value, e)
        super().__init__(option_strings, dest, **kwargs)

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: Optional[str] = None,
    ) -> None:
        """Store the value given on the command line."""
        setattr(namespace, self.dest, values)


class EnvironmentAwareBooleanAction(argparse._StoreTrueAction):
    """``store_true`` action that takes its default from a ``TOMLSPAN_*`` variable."""

    def __init__(self, option_strings: list[str], dest: str, **kwargs: Any):
        name = _dest_from_options(option_strings, dest)
        if name:
            env_value = os.environ.get(env_key_for(name))
            if env_value is not None:
                kwargs["default"] = env_value.lower() in TRUTHY_VALUES
        super().__init__(option_strings, dest, **kwargs)
