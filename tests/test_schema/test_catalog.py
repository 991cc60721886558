"""Tests for oasregistry.schema.catalog -- record deduplication and inlining.

Payload types are declared here and then re-homed into ``acme.billing.*``
modules, the way they would live in a real host program. The module avoids
postponed annotations so pydantic never has to evaluate field types in the
re-homed namespace.
"""

import dataclasses
import enum
import logging
from typing import Any, Callable, Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field

from oasregistry.exceptions import (
    ForeignTypeError,
    NamingCollisionError,
    SchemaCycleError,
    SchemaGenerationError,
    SchemaNotImplementedError,
    UnsupportedKindError,
)
from oasregistry.models import Info, OpenAPIDocument
from oasregistry.schema.catalog import SCHEMA_REF_PREFIX, SchemaCatalog

CONTRACTS = "acme.billing.contracts"


def _owned_by(module: str, *types: type) -> None:
    for tp in types:
        tp.__module__ = module


class User(BaseModel):
    id: int
    name: str


class Address(BaseModel):
    city: str


class Invoice(BaseModel):
    number: str
    billing: Address
    shipping: Optional[Address] = None


@dataclasses.dataclass
class Money:
    amount: int
    currency: str


class Color(str, enum.Enum):
    RED = "red"
    BLUE = "blue"


class Node(BaseModel):
    name: str
    children: list["Node"] = []


class Department(BaseModel):
    name: str
    manager: Optional["Employee"] = None


class Employee(BaseModel):
    name: str
    department: Department


Department.model_rebuild()
Employee.model_rebuild()


class Opaque:
    pass


class Blob(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    handle: Opaque


class Pointer(BaseModel):
    ref: str = Field(alias="$ref")


def _other_user() -> type:
    class User(BaseModel):
        email: str

    return User


OtherUser = _other_user()

_owned_by(
    CONTRACTS, User, Address, Invoice, Money, Color, Node, Department, Employee, Blob, Pointer, OtherUser
)


class ForeignUser(BaseModel):
    id: int


_owned_by("other.dto", ForeignUser)


def _contains_ref(obj: Any) -> bool:
    if isinstance(obj, dict):
        return "$ref" in obj or any(_contains_ref(value) for value in obj.values())
    if isinstance(obj, list):
        return any(_contains_ref(item) for item in obj)
    return False


@pytest.fixture
def document() -> OpenAPIDocument:
    return OpenAPIDocument(info=Info(title="Billing API", version="1.0.0"))


@pytest.fixture
def catalog(document: OpenAPIDocument) -> SchemaCatalog:
    return SchemaCatalog(document, host_module="acme.billing")


class TestRecords:
    def test_record_is_cataloged_and_referenced(
        self, catalog: SchemaCatalog, document: OpenAPIDocument
    ) -> None:
        assert catalog.resolve(User) == {"$ref": SCHEMA_REF_PREFIX + "ContractsUser"}
        assert document.components is not None
        schema = document.components.schemas["ContractsUser"]
        assert schema["type"] == "object"
        assert set(schema["properties"]) == {"id", "name"}
        assert catalog.names == ["ContractsUser"]

    def test_same_type_twice_is_one_entry(
        self, catalog: SchemaCatalog, document: OpenAPIDocument
    ) -> None:
        first = catalog.resolve(User)
        second = catalog.resolve(User)
        assert first == second
        assert document.components is not None
        assert list(document.components.schemas) == ["ContractsUser"]

    def test_dataclass_record(self, catalog: SchemaCatalog, document: OpenAPIDocument) -> None:
        assert catalog.resolve(Money) == {"$ref": SCHEMA_REF_PREFIX + "ContractsMoney"}
        assert document.components is not None
        assert set(document.components.schemas["ContractsMoney"]["properties"]) == {
            "amount",
            "currency",
        }

    def test_nested_records_are_inlined(
        self, catalog: SchemaCatalog, document: OpenAPIDocument
    ) -> None:
        catalog.resolve(Invoice)
        assert document.components is not None
        assert list(document.components.schemas) == ["ContractsInvoice"]
        schema = document.components.schemas["ContractsInvoice"]
        assert not _contains_ref(schema)
        assert set(schema["properties"]["billing"]["properties"]) == {"city"}

    def test_field_aliased_ref(self, catalog: SchemaCatalog, document: OpenAPIDocument) -> None:
        assert catalog.resolve(Pointer) == {"$ref": SCHEMA_REF_PREFIX + "ContractsPointer"}
        assert document.components is not None
        schema = document.components.schemas["ContractsPointer"]
        assert schema["properties"]["$ref"]["type"] == "string"
        assert schema["required"] == ["$ref"]

    def test_naming_collision(self, catalog: SchemaCatalog, document: OpenAPIDocument) -> None:
        catalog.resolve(User)
        with pytest.raises(NamingCollisionError, match="ContractsUser"):
            catalog.resolve(OtherUser)
        assert document.components is not None
        assert set(document.components.schemas["ContractsUser"]["properties"]) == {"id", "name"}

    def test_foreign_record(self, catalog: SchemaCatalog, document: OpenAPIDocument) -> None:
        with pytest.raises(ForeignTypeError):
            catalog.resolve(ForeignUser)
        assert document.components is None

    def test_prefix_trimming(self, document: OpenAPIDocument) -> None:
        catalog = SchemaCatalog(
            document, host_module="acme.billing", schema_key_prefixes_to_trim=["Contracts"]
        )
        assert catalog.resolve(User) == {"$ref": SCHEMA_REF_PREFIX + "User"}

    def test_unknown_host_module_uses_full_path(self, document: OpenAPIDocument) -> None:
        catalog = SchemaCatalog(document)
        assert catalog.resolve(User) == {"$ref": SCHEMA_REF_PREFIX + "AcmeBillingContractsUser"}

    def test_logs_registration(
        self, catalog: SchemaCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="oasregistry.schema.catalog"):
            catalog.resolve(User)
        assert "Cataloged schema ContractsUser" in caplog.text


class TestCycles:
    def test_self_referencing_record(
        self, catalog: SchemaCatalog, document: OpenAPIDocument
    ) -> None:
        with pytest.raises(SchemaCycleError):
            catalog.resolve(Node)
        assert document.components is None
        assert catalog.names == []

    def test_mutually_referencing_records(self, catalog: SchemaCatalog) -> None:
        with pytest.raises(SchemaCycleError):
            catalog.resolve(Department)

    def test_cycle_is_not_remembered(self, catalog: SchemaCatalog) -> None:
        with pytest.raises(SchemaCycleError):
            catalog.resolve(Node)
        with pytest.raises(SchemaCycleError):
            catalog.resolve(Node)


class TestInlineKinds:
    def test_collection_of_primitives_is_never_cataloged(
        self, catalog: SchemaCatalog, document: OpenAPIDocument
    ) -> None:
        assert catalog.resolve(list[int]) == {"type": "array", "items": {"type": "integer"}}
        assert document.components is None

    def test_collection_of_records(self, catalog: SchemaCatalog) -> None:
        assert catalog.resolve(list[User]) == {
            "type": "array",
            "items": {"$ref": SCHEMA_REF_PREFIX + "ContractsUser"},
        }
        assert catalog.names == ["ContractsUser"]

    def test_nested_collections(self, catalog: SchemaCatalog) -> None:
        assert catalog.resolve(list[set[str]]) == {
            "type": "array",
            "items": {"type": "array", "items": {"type": "string"}},
        }

    @pytest.mark.parametrize(
        ("tp", "expected"),
        [(int, {"type": "integer"}), (str, {"type": "string"}), (bool, {"type": "boolean"})],
    )
    def test_primitives(
        self, catalog: SchemaCatalog, document: OpenAPIDocument, tp: Any, expected: dict
    ) -> None:
        assert catalog.resolve(tp) == expected
        assert document.components is None

    def test_enum_is_inlined(self, catalog: SchemaCatalog, document: OpenAPIDocument) -> None:
        schema = catalog.resolve(Color)
        assert schema["enum"] == ["red", "blue"]
        assert document.components is None


class TestRejectedKinds:
    @pytest.mark.parametrize("tp", [dict, dict[str, int], dict[str, User]])
    def test_maps_not_implemented(self, catalog: SchemaCatalog, tp: Any) -> None:
        with pytest.raises(SchemaNotImplementedError):
            catalog.resolve(tp)

    @pytest.mark.parametrize("tp", [Any, Optional[User], Callable[[], int], Opaque, list[Any]])
    def test_unsupported(self, catalog: SchemaCatalog, tp: Any) -> None:
        with pytest.raises(UnsupportedKindError):
            catalog.resolve(tp)

    def test_generation_failure(self, catalog: SchemaCatalog, document: OpenAPIDocument) -> None:
        with pytest.raises(SchemaGenerationError, match="Blob"):
            catalog.resolve(Blob)
        assert document.components is None


class TestClear:
    def test_clear_forgets_types_and_prefixes(self, document: OpenAPIDocument) -> None:
        catalog = SchemaCatalog(
            document, host_module="acme.billing", schema_key_prefixes_to_trim=["Contracts"]
        )
        catalog.resolve(User)
        catalog.clear()
        assert catalog.names == []
        assert catalog.resolve(User) == {"$ref": SCHEMA_REF_PREFIX + "ContractsUser"}
