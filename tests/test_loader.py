"""Tests for oasregistry.loader -- importing registries named on the command line."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from oasregistry.exceptions import DuplicateEndpointError, TargetLoadError
from oasregistry.loader import load_target
from oasregistry.models import OpenAPIDocument


class TestLoadTarget:
    @pytest.mark.parametrize("attribute", ["registry", "document", "make_registry"])
    def test_supported_targets(self, tmp_path: Path, billing_target: str, attribute: str) -> None:
        document = load_target(f"{billing_target}:{attribute}", app_dir=tmp_path)
        assert isinstance(document, OpenAPIDocument)
        assert list(document.paths) == ["/users/{userId}", "/users"]
        assert document.components is not None
        assert list(document.components.schemas) == ["ContractsUser"]

    def test_dotted_attribute(self, tmp_path: Path, write_target) -> None:
        module_name = write_target(
            "import types\n"
            "from oasregistry import Info, Registry\n"
            "api = types.SimpleNamespace(registry=Registry(Info(title='T', version='1'), host_module=''))\n"
        )
        document = load_target(f"{module_name}:api.registry", app_dir=tmp_path)
        assert document.info.title == "T"

    def test_app_dir_added_to_sys_path(self, tmp_path: Path, billing_target: str) -> None:
        load_target(f"{billing_target}:registry", app_dir=tmp_path)
        assert str(tmp_path.resolve()) in sys.path

    @pytest.mark.parametrize("target", ["billing", ":registry", "billing:", ""])
    def test_malformed_target(self, target: str) -> None:
        with pytest.raises(TargetLoadError, match="expected 'package.module:attribute'"):
            load_target(target)

    def test_missing_module(self, tmp_path: Path, isolated_sys_path: None) -> None:
        with pytest.raises(TargetLoadError, match="Cannot import module"):
            load_target("no_such_module_for_oasreg:registry", app_dir=tmp_path)

    def test_missing_attribute(self, tmp_path: Path, billing_target: str) -> None:
        with pytest.raises(TargetLoadError, match="has no attribute 'registries'"):
            load_target(f"{billing_target}:registries", app_dir=tmp_path)

    @pytest.mark.parametrize(
        "source",
        [
            "value = 42\n",
            "class value:\n    pass\n",
            "def value():\n    return 42\n",
            "def value():\n    return value\n",
        ],
        ids=["int", "class", "factory-returning-int", "factory-returning-callable"],
    )
    def test_unsupported_attribute(self, tmp_path: Path, write_target, source: str) -> None:
        module_name = write_target(source)
        with pytest.raises(TargetLoadError, match="expected a Registry"):
            load_target(f"{module_name}:value", app_dir=tmp_path)

    def test_registration_errors_propagate(self, tmp_path: Path, broken_target: str) -> None:
        with pytest.raises(DuplicateEndpointError):
            load_target(f"{broken_target}:registry", app_dir=tmp_path)
