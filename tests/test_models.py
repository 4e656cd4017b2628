"""Tests for the sync-domain Pydantic models and exceptions."""

from uuid import UUID

import pytest
from pydantic import ValidationError

from typesync.sync.errors import (
    AmbiguousMatchError,
    ConfigurationError,
    DefinitionNotFoundError,
    SyncError,
)
from typesync.sync.models import (
    BatchValidationResult,
    DatabaseType,
    Definition,
    ModelDescriptor,
    PlannedSync,
    PreValue,
    PreValueCollection,
    SyncPlan,
    SyncResult,
    ValidationIssue,
)

G1 = UUID("6c4d7a4e-2b56-4b2a-8c59-0d7e6b8f1a10")


class TestModelDescriptor:
    """Verify descriptor defaults and validation."""

    def test_defaults(self) -> None:
        model = ModelDescriptor(name="Color Picker", editor="colorpicker.editor")
        assert model.value_type is str
        assert model.id is None
        assert model.pre_values is None
        assert model.source_type is None

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ModelDescriptor(name="", editor="tags")

    def test_empty_editor_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ModelDescriptor(name="Tags", editor="")

    def test_id_parsed_from_string(self) -> None:
        model = ModelDescriptor(name="Tags", editor="tags", id=str(G1))
        assert model.id == G1

    def test_value_type_must_be_a_type(self) -> None:
        with pytest.raises(ValidationError):
            ModelDescriptor(name="Tags", editor="tags", value_type="int")

    def test_frozen(self) -> None:
        model = ModelDescriptor(name="Tags", editor="tags")
        with pytest.raises(ValidationError):
            model.name = "Other"

    def test_label_mentions_id(self) -> None:
        assert ModelDescriptor(name="Tags", editor="tags").label == "'Tags' (tags)"
        assert str(G1) in ModelDescriptor(name="Tags", editor="tags", id=G1).label


class TestDatabaseType:
    def test_storage_values(self) -> None:
        assert DatabaseType.INTEGER.value == "integer"
        assert DatabaseType.DATE.value == "date"
        assert DatabaseType.LONG_TEXT.value == "ntext"

    def test_definition_accepts_raw_value(self) -> None:
        definition = Definition(name="Count", editor="numeric", database_type="integer")
        assert definition.database_type is DatabaseType.INTEGER

    def test_definition_defaults(self) -> None:
        definition = Definition(name="Tags", editor="tags")
        assert definition.id is None
        assert definition.database_type is DatabaseType.LONG_TEXT


class TestPreValueCollection:
    def test_empty_collection_is_key_addressable(self) -> None:
        collection = PreValueCollection()
        assert collection.is_key_addressable is True
        assert collection.as_dict() == {}

    def test_as_dict(self) -> None:
        collection = PreValueCollection(
            entries={
                "swatches": PreValue(value="red,green", id=1),
                "mode": PreValue(value="hex", id=2, sort_order=1),
            }
        )
        assert collection.as_dict() == {"swatches": "red,green", "mode": "hex"}


class TestBatchValidationResult:
    def test_valid_report(self) -> None:
        result = BatchValidationResult(valid=True, model_count=4)
        assert result.error_count == 0
        assert result.format_report() == "Models valid"

    def test_invalid_report_lists_every_issue(self) -> None:
        result = BatchValidationResult(
            valid=False,
            issues=[
                ValidationIssue(kind="duplicate_id", message="first"),
                ValidationIssue(kind="duplicate_name", message="second"),
            ],
        )
        assert result.format_report() == (
            "Model validation failed (2 issues):\n  - first\n  - second"
        )


class TestPlanAndResult:
    def test_planned_action(self) -> None:
        model = ModelDescriptor(name="Tags", editor="tags")
        create = PlannedSync(model=model)
        update = PlannedSync(
            model=model,
            definition=Definition(id=1, name="Tags", editor="tags"),
            matched_by="name",
        )

        assert create.action == "create"
        assert update.action == "update"

        plan = SyncPlan(items=[create, update])
        assert plan.creates == [create]
        assert plan.updates == [update]

    def test_sync_result_total(self) -> None:
        result = SyncResult(created=["A"], updated=["B", "C"], mapped=2)
        assert result.total == 3


class TestErrors:
    def test_hierarchy(self) -> None:
        assert issubclass(ConfigurationError, SyncError)
        assert issubclass(AmbiguousMatchError, ConfigurationError)
        assert issubclass(DefinitionNotFoundError, SyncError)
        assert issubclass(DefinitionNotFoundError, LookupError)

    def test_ambiguous_match_message(self) -> None:
        error = AmbiguousMatchError(["one", "two"])
        assert error.conflicts == ["one", "two"]
        assert str(error) == "Ambiguous definition match (2):\n  - one\n  - two"
