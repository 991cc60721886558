"""Shared test fixtures for oasregistry.

Provides a fresh registry bound to a synthetic ``acme.billing`` host module,
an isolated working directory for config files, and a clean environment for
the ``OASREGISTRY_*`` variables. These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import logging
import sys
import uuid
from pathlib import Path
from typing import Iterator

import pytest

from oasregistry.models import Info
from oasregistry.output import reset_output
from oasregistry.registry import Registry

HOST_MODULE = "acme.billing"


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> Iterator[None]:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which Typer's CliRunner swaps out during a test.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Drop the Rich handler ``oasreg`` attaches to the package logger."""
    package_logger = logging.getLogger("oasregistry")
    level = package_logger.level
    yield
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(level)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables from leaking into config resolution."""
    monkeypatch.delenv("OASREGISTRY_HOST_MODULE", raising=False)
    monkeypatch.delenv("OASREGISTRY_TRIM_PREFIXES", raising=False)


@pytest.fixture
def info() -> Info:
    return Info(title="Billing API", version="1.0.0")


@pytest.fixture
def registry(info: Info) -> Registry:
    """A registry owning payload types under the ``acme.`` organization."""
    return Registry(info, host_module=HOST_MODULE)


@pytest.fixture
def tmp_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside an empty temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def isolated_sys_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Restore ``sys.path`` after tests that import targets from tmp dirs."""
    monkeypatch.setattr(sys, "path", list(sys.path))


# ---------------------------------------------------------------------------
# Importable targets for the loader and the CLI
# ---------------------------------------------------------------------------

BILLING_TARGET = '''
from pydantic import BaseModel

from oasregistry import Info, Registry


class User(BaseModel):
    id: int
    name: str


User.__module__ = "acme.billing.contracts"


def make_registry():
    registry = Registry(Info(title="Billing API", version="1.0.0"), host_module="acme.billing")
    (
        registry.add_endpoint("GET", "/users/{userId}")
        .with_summary("Fetch a user")
        .with_response_with_content(200, "", User)
    )
    registry.add_endpoint("POST", "/users").with_response(201)
    return registry


registry = make_registry()
document = make_registry().build_spec()
'''

BROKEN_TARGET = '''
from oasregistry import Info, Registry

registry = Registry(Info(title="Broken API", version="1.0.0"), host_module="")
registry.add_endpoint("GET", "/users")
registry.add_endpoint("GET", "/users")
'''


@pytest.fixture
def write_target(tmp_path: Path, isolated_sys_path: None):
    """Write an importable module into ``tmp_path`` and return its name.

    Every call uses a fresh module name so cached imports from earlier tests
    never leak a consumed registry into later ones.
    """

    def _write(source: str) -> str:
        module_name = f"target_{uuid.uuid4().hex}"
        (tmp_path / f"{module_name}.py").write_text(source, encoding="utf-8")
        return module_name

    return _write


@pytest.fixture
def billing_target(write_target) -> str:
    """Module exposing ``registry``, ``document`` and ``make_registry``."""
    return write_target(BILLING_TARGET)


@pytest.fixture
def broken_target(write_target) -> str:
    """Module whose import fails with a duplicate endpoint registration."""
    return write_target(BROKEN_TARGET)
