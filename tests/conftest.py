"""Pytest configuration and shared fixtures for the tomlspan test suite."""

import logging
import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


SAMPLE_TOML = """\
# Service configuration
title = "demo"   # shown in the UI

[server]
host = "127.0.0.1"
port = 8080
tls.enabled = true
tls.cert = 'certs/server.pem'

[database]
# connection settings
url = "postgres://localhost/demo"
pool = { min = 1, max = 10 }

[[plugins]]
name = "auth"
order = [1, 2, 3]

[[plugins]]
name = "cache"
ttl = 1979-05-27T07:32:00Z
"""


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests with Hypothesis")


@pytest.fixture
def sample_toml() -> str:
    """Return a document exercising comments, headers, dotted keys and arrays of tables."""
    return SAMPLE_TOML


@pytest.fixture
def sample_file(tmp_path: Path, sample_toml: str) -> Path:
    """Write the sample document to a temporary file."""
    path = tmp_path / "config.toml"
    path.write_bytes(sample_toml.encode("utf-8"))
    return path


@pytest.fixture
def restore_logging():
    """Restore root logger handlers and level changed by CLI runs."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
