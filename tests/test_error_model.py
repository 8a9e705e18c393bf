"""Tests for the error classification, entity references and findings."""

import dataclasses

import pytest

from gtfs_canon.codebook.entities import EntityType
from gtfs_canon.codebook.errors import ErrorType, Severity
from gtfs_canon.core.errors import EntityReference, ValidationError
from tests.fixtures import create_route, create_stop, create_stop_time


class TestSeverity:
    """Tests for severity ordering."""

    def test_total_order(self):
        """Severities should be ordered INFO < WARNING < ERROR < FATAL."""
        assert Severity.INFO < Severity.WARNING < Severity.ERROR < Severity.FATAL
        assert sorted(Severity, reverse=True)[0] is Severity.FATAL

    def test_comparisons_are_inclusive(self):
        """<= and >= should hold for equal members."""
        assert Severity.ERROR >= Severity.ERROR
        assert Severity.ERROR <= Severity.ERROR
        assert not Severity.WARNING > Severity.ERROR

    def test_comparison_with_other_types_fails(self):
        """Ordering against a non-severity should raise TypeError."""
        with pytest.raises(TypeError):
            _ = Severity.INFO < 3


class TestErrorType:
    """Tests for the closed error classification."""

    def test_fixed_metadata(self):
        """Members should carry their severity and entity category."""
        assert ErrorType.TABLE_MISSING.severity is Severity.FATAL
        assert ErrorType.REFERENTIAL_INTEGRITY.severity is Severity.ERROR
        assert ErrorType.ROUTE_SHORT_NAME_TOO_LONG.entity_type is EntityType.ROUTE
        assert ErrorType.MISSING_FIELD.entity_type is EntityType.UNKNOWN

    def test_shared_metadata_does_not_alias(self):
        """Kinds with identical metadata should stay distinct members."""
        assert ErrorType.MISSING_FIELD.severity is ErrorType.DUPLICATE_ID.severity
        assert ErrorType.MISSING_FIELD is not ErrorType.DUPLICATE_ID
        assert ErrorType["DUPLICATE_ID"] is ErrorType.DUPLICATE_ID
        assert len({member.value for member in ErrorType}) == len(ErrorType)

    def test_lookup_by_name(self):
        """Stored names should resolve back to members."""
        assert ErrorType.from_name("TABLE_MISSING") is ErrorType.TABLE_MISSING
        with pytest.raises(ValueError, match="Unknown ErrorType"):
            ErrorType.from_name("NOT_A_KIND")

    def test_at_least(self):
        """at_least should return members at or above a severity."""
        fatal = ErrorType.at_least(Severity.FATAL)
        assert ErrorType.TABLE_MISSING in fatal
        assert ErrorType.MISSING_FIELD not in fatal
        assert len(ErrorType.at_least(Severity.INFO)) == len(ErrorType)

    def test_label(self):
        """Labels should be lower-case member names."""
        assert ErrorType.REFERENTIAL_INTEGRITY.label == "referential_integrity"


class TestEntityReference:
    """Tests for references to affected records."""

    def test_from_entity(self):
        """Should capture category, id, sequence number and line."""
        stop_time = create_stop_time(trip_id="T9", stop_sequence=4, source_line=17)
        ref = EntityReference.from_entity(stop_time)
        assert ref == EntityReference(EntityType.STOP_TIME, "T9", 4, 17)

    def test_from_entity_without_sequence(self):
        """Records outside a sequence should have no sequence number."""
        ref = EntityReference.from_entity(create_stop(stop_id="S5", source_line=3))
        assert ref.entity_type is EntityType.STOP
        assert ref.id == "S5"
        assert ref.sequence_number is None
        assert ref.line_number == 3

    def test_snapshot_ignores_later_mutation(self):
        """Changing the record afterwards should not change the reference."""
        route = create_route(route_id="R1", source_line=42)
        ref = EntityReference.from_entity(route)

        route.route_id = "R2"
        route.source_line = 99

        assert ref.id == "R1"
        assert ref.line_number == 42

    def test_from_line(self):
        """Type+line references should have no id or sequence number."""
        ref = EntityReference.from_line(EntityType.TRIP, 8)
        assert ref.entity_type is EntityType.TRIP
        assert ref.id is None
        assert ref.sequence_number is None
        assert ref.line_number == 8

    def test_from_line_unknown_line(self):
        """An unknown line number should be allowed."""
        assert EntityReference.from_line(EntityType.TRIP, None).line_number is None

    def test_from_line_requires_entity_type(self):
        """Omitting the entity type should fail fast."""
        with pytest.raises(ValueError, match="entity_type"):
            EntityReference.from_line(None, 8)

    def test_immutable(self):
        """References should not be assignable after construction."""
        ref = EntityReference.from_line(EntityType.TRIP, 8)
        with pytest.raises(dataclasses.FrozenInstanceError):
            ref.line_number = 9


class TestValidationError:
    """Tests for the three construction paths of a finding."""

    def test_from_entities_preserves_order(self):
        """One reference per record, in the order supplied."""
        stops = [create_stop(stop_id=f"S{i}", source_line=i + 2) for i in range(3)]
        error = ValidationError.from_entities(ErrorType.DUPLICATE_STOP, "stop_name=Main", *stops)

        assert error.type is ErrorType.DUPLICATE_STOP
        assert error.bad_values == "stop_name=Main"
        assert [ref.id for ref in error.referenced_entities] == ["S0", "S1", "S2"]
        assert error.primary_entity.id == "S0"

    def test_from_entities_with_no_records(self):
        """Zero records should give an empty reference tuple."""
        error = ValidationError.from_entities(ErrorType.OTHER, "")
        assert error.referenced_entities == ()

    def test_from_line(self):
        """Type+line construction should give exactly one bare reference."""
        error = ValidationError.from_line(
            ErrorType.WRONG_NUMBER_OF_FIELDS,
            "expected=5;found=3",
            EntityType.STOP_TIME,
            12,
        )
        assert error.type is ErrorType.WRONG_NUMBER_OF_FIELDS
        assert error.bad_values == "expected=5;found=3"
        assert error.referenced_entities == (EntityReference(EntityType.STOP_TIME, None, None, 12),)

    def test_without_entities(self):
        """No-entity construction should give an empty tuple, never None."""
        error = ValidationError.without_entities(ErrorType.TABLE_MISSING, "")
        assert error.type is ErrorType.TABLE_MISSING
        assert error.bad_values == ""
        assert error.referenced_entities == ()
        assert error.primary_entity is None

    @pytest.mark.parametrize(
        "build",
        [
            lambda: ValidationError.from_entities(None, "x=1", create_route()),
            lambda: ValidationError.from_line(None, "x=1", EntityType.ROUTE, 2),
            lambda: ValidationError.without_entities(None, "x=1"),
            lambda: ValidationError("MISSING_FIELD", "x=1"),
        ],
    )
    def test_missing_classification_fails_fast(self, build):
        """Every path should reject a missing or non-enum classification."""
        with pytest.raises(ValueError, match="must be an ErrorType"):
            build()

    @pytest.mark.parametrize(
        ("bad_values", "references", "match"),
        [
            (None, (), "bad_values must be a str or mapping"),
            (42, (), "bad_values must be a str or mapping"),
            ("x=1", ("ROUTE",), "must hold EntityReference values"),
            ("x=1", [EntityReference.from_line(EntityType.ROUTE, 2), None], "EntityReference"),
        ],
    )
    def test_malformed_fields_fail_fast(self, bad_values, references, match):
        """Non-string bad values and non-reference entries should be rejected."""
        with pytest.raises(ValueError, match=match):
            ValidationError(ErrorType.OTHER, bad_values, references)

    def test_none_references_become_empty(self):
        """A None reference list should be stored as an empty tuple."""
        error = ValidationError(ErrorType.OTHER, "", None)
        assert error.referenced_entities == ()

    def test_mapping_bad_values_are_encoded(self):
        """A mapping of bad values should be encoded in order."""
        error = ValidationError.without_entities(
            ErrorType.MISSING_COLUMN,
            {"table": "stops", "column": "stop_id"},
        )
        assert error.bad_values == "table=stops;column=stop_id"
        assert error.bad_value_pairs == {"table": "stops", "column": "stop_id"}

    def test_reference_list_is_frozen(self):
        """References passed as a list should be stored as a tuple."""
        refs = [EntityReference.from_line(EntityType.STOP, 2)]
        error = ValidationError(ErrorType.OTHER, "", refs)
        refs.append(EntityReference.from_line(EntityType.STOP, 3))

        assert isinstance(error.referenced_entities, tuple)
        assert len(error.referenced_entities) == 1
        with pytest.raises(dataclasses.FrozenInstanceError):
            error.bad_values = "changed"

    def test_severity_follows_type(self):
        """Severity should come from the classification."""
        error = ValidationError.without_entities(ErrorType.TABLE_MISSING, "")
        assert error.severity is Severity.FATAL


class TestScenarios:
    """Worked examples of findings raised by validation passes."""

    def test_missing_field_without_entities(self):
        """A missing field reported at file level references nothing."""
        error = ValidationError.without_entities(ErrorType.MISSING_FIELD, "field=route_id")
        assert error.bad_values == "field=route_id"
        assert len(error.referenced_entities) == 0

    def test_route_with_unknown_agency(self):
        """A dangling agency reference points at the route only."""
        route = create_route(route_id="R1", agency_id="XYZ", source_line=42)
        error = ValidationError.from_entities(
            ErrorType.REFERENTIAL_INTEGRITY,
            "agency_id=XYZ",
            route,
        )
        assert error.referenced_entities == (
            EntityReference(
                entity_type=EntityType.ROUTE,
                id="R1",
                sequence_number=None,
                line_number=42,
            ),
        )

    def test_table_missing_has_empty_references(self):
        """A missing table has an empty, non-null reference sequence."""
        error = ValidationError.without_entities(ErrorType.TABLE_MISSING, "")
        assert error.referenced_entities is not None
        assert error.referenced_entities == ()
