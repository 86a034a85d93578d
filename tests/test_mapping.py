"""Tests for key translation and the per-entity field map."""

from datetime import date

import pytest

from finplan.mapping import camel_to_snake, map_from_db, map_to_db, snake_to_camel
from finplan.models import Budget, Client, Goal, GoalPriority, LegalSecurity
from finplan.services.field_map import FieldMap
from finplan.services.storage import StorageError, ValidationError


class TestKeyConversion:
    """Tests for the string helpers."""

    def test_camel_to_snake(self):
        assert camel_to_snake("currentBalanceMan") == "current_balance_man"
        assert camel_to_snake("clientId") == "client_id"

    def test_snake_to_camel(self):
        assert snake_to_camel("current_balance_man") == "currentBalanceMan"
        assert snake_to_camel("client_id") == "clientId"

    def test_conversion_is_idempotent(self):
        """Test keys already in the target convention pass through."""
        assert camel_to_snake("target_year") == "target_year"
        assert snake_to_camel("targetYear") == "targetYear"
        assert camel_to_snake(camel_to_snake("targetYear")) == "target_year"

    def test_map_to_db_strips_id(self):
        """Test the id key is removed on write and values are untouched."""
        row = map_to_db({"id": 4, "clientId": 1, "targetYear": 2030, "meta": {"innerKey": 1}})
        assert row == {"client_id": 1, "target_year": 2030, "meta": {"innerKey": 1}}

    def test_map_from_db(self):
        """Test only top-level keys are translated."""
        assert map_from_db({"client_id": 1, "extra": {"inner_key": 2}}) == {
            "clientId": 1,
            "extra": {"inner_key": 2},
        }


class TestFieldMap:
    """Tests for FieldMap."""

    def test_to_columns_accepts_both_spellings(self):
        """Test camelCase and snake_case keys map to the same column."""
        goals = FieldMap(Goal)
        assert goals.to_columns({"targetYear": 2030}) == {"target_year": 2030}
        assert goals.to_columns({"target_year": 2030}) == {"target_year": 2030}

    def test_to_columns_uses_explicit_aliases(self):
        """Test aliases that are not mechanical conversions."""
        assert FieldMap(Budget).to_columns({"taxesDA": True}) == {"taxes_da": True}
        assert FieldMap(LegalSecurity).to_columns({"has3aBeneficiary": True}) == {
            "has_3a_beneficiary": True
        }

    def test_to_columns_rejects_unknown_keys(self):
        """Test a misspelled field is an error, not a dropped column."""
        with pytest.raises(ValidationError, match="targetyear"):
            FieldMap(Goal).to_columns({"targetyear": 2030})

    def test_to_columns_validates_values(self):
        """Test values are checked against field type and constraints."""
        clients = FieldMap(Client)
        with pytest.raises(ValidationError):
            clients.to_columns({"employmentRateMan": 150})
        with pytest.raises(ValidationError):
            clients.to_columns({"firstName": None})

    def test_to_columns_serialises_values(self):
        """Test dates and enums are written in JSON form."""
        columns = FieldMap(Goal).to_columns({"priority": GoalPriority.HIGH})
        assert columns == {"priority": "high"}

        columns = FieldMap(Client).to_columns({"birthDate": date(1980, 5, 1)})
        assert columns == {"birth_date": "1980-05-01"}

    def test_to_columns_drops_id(self):
        assert FieldMap(Goal).to_columns({"id": 3, "description": "Trip"}) == {
            "description": "Trip"
        }

    def test_to_row_omits_none_and_id(self):
        """Test insert rows carry defaults but not unset optional fields."""
        row = FieldMap(Goal).to_row(
            Goal(id=9, client_id=1, description="Trip", target_year=2)
        )
        assert row == {
            "client_id": 1,
            "description": "Trip",
            "target_year": 2,
            "priority": "medium",
            "status": "planned",
        }

    def test_coerce_mapping(self):
        goal = FieldMap(Goal).coerce({"clientId": 1, "description": "Trip", "targetYear": 2})
        assert isinstance(goal, Goal)
        assert goal.target_year == 2

    def test_coerce_missing_required_field(self):
        with pytest.raises(ValidationError):
            FieldMap(Goal).coerce({"clientId": 1, "targetYear": 2})

    def test_from_row(self):
        goal = FieldMap(Goal).from_row(
            {"id": 1, "client_id": 1, "description": "Trip", "target_year": 2,
             "priority": "low", "status": "planned", "created_at": "2024-01-01T10:00:00+00:00"}
        )
        assert goal.priority == GoalPriority.LOW
        assert goal.created_at.year == 2024

    def test_from_row_null_flags_use_defaults(self):
        """Test NULL in a defaulted non-optional column reads as the default."""
        budget = FieldMap(Budget).from_row(
            {"id": 1, "client_id": 1, "taxes_da": None, "food_man": None}
        )
        assert budget.taxes_da is False
        assert budget.food_man is None

        goal = FieldMap(Goal).from_row(
            {"id": 1, "client_id": 1, "description": "Trip", "target_year": 2,
             "priority": None, "status": None}
        )
        assert goal.priority == GoalPriority.MEDIUM

    def test_from_row_invalid(self):
        """Test a corrupt stored row surfaces as a storage error."""
        with pytest.raises(StorageError):
            FieldMap(Goal).from_row({"id": 1, "client_id": 1})
