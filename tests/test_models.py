"""
Tests for Financial Planning models

Test strategy:
1. Unit tests for models, mapping and calculators
2. Repository tests against an in-memory SQLite database
3. No real network calls (the REST backend runs on httpx.MockTransport)
"""

import json
from uuid import uuid4

import pytest

from finplan.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Budget,
    Client,
    ClientExport,
    Goal,
    GoalPriority,
    GoalStatus,
    HealthInsurance,
    LegalSecurity,
    LIST_TABLES,
    NetWorthBreakdown,
    OWNED_TABLES,
    Pension,
    Pillar1,
    RiskProfile,
    SINGLE_RECORD_TABLES,
    TABLES_BY_NAME,
    EntityKind,
)


class TestClientModel:
    """Tests for the Client model."""

    def test_client_creation(self):
        """Test Client creation with snake_case names."""
        client = Client(first_name="Anna", last_name="Muster")
        assert client.first_name == "Anna"
        assert client.save_taxes is False
        assert client.id is None

    def test_client_accepts_camel_case(self):
        """Test that camelCase aliases populate the same fields."""
        client = Client(firstName="Anna", lastName="Muster", saveTaxes=True)
        assert client.last_name == "Muster"
        assert client.save_taxes is True

    def test_client_strips_whitespace(self):
        """Test that whitespace is stripped from names."""
        client = Client(first_name="  Anna ", last_name=" Muster")
        assert client.first_name == "Anna"
        assert client.last_name == "Muster"

    def test_client_requires_names(self):
        """Test that first and last name are required and non-empty."""
        with pytest.raises(ValueError):
            Client(first_name="Anna")
        with pytest.raises(ValueError):
            Client(first_name="", last_name="Muster")

    def test_employment_rate_bounds(self):
        """Test employment rate must be a percentage."""
        with pytest.raises(ValueError):
            Client(first_name="Anna", last_name="Muster", employment_rate_man=120)

    def test_display_name(self):
        """Test display name with and without partner."""
        client = Client(first_name="Anna", last_name="Muster")
        assert client.display_name == "Muster, Anna"

        couple = Client(first_name="Anna", last_name="Muster", partner_first_name="Beat")
        assert couple.display_name == "Muster, Anna & Beat"

    def test_selected_goals(self):
        """Test selected planning goals are listed in form order."""
        client = Client(
            first_name="Anna",
            last_name="Muster",
            home_ownership=True,
            save_taxes=True,
        )
        assert client.selected_goals == ["save_taxes", "home_ownership"]


class TestOwnedRecordModels:
    """Tests for client-owned record models."""

    def test_goal_defaults(self):
        """Test Goal default priority and status."""
        goal = Goal(client_id=1, description="New car", target_year=3)
        assert goal.priority == GoalPriority.MEDIUM
        assert goal.status == GoalStatus.PLANNED

    def test_goal_requires_description(self):
        """Test that a goal without description is rejected."""
        with pytest.raises(ValueError):
            Goal(client_id=1, target_year=3)

    def test_owned_record_accepts_uuid_ids(self):
        """Test that hosted-backend UUID ids are accepted."""
        client_id = uuid4()
        goal = Goal(id=uuid4(), client_id=client_id, description="Trip", target_year=1)
        assert goal.client_id == client_id

    def test_health_insurance_defaults(self):
        """Test that health defaults to healthy, not smoking."""
        record = HealthInsurance(client_id=1)
        assert record.is_healthy_man is True
        assert record.is_healthy_woman is True
        assert record.is_smoker_man is False

    def test_every_single_record_has_defaults(self):
        """Test that single records can be created from a client id alone."""
        for entity in SINGLE_RECORD_TABLES:
            record = entity.model(client_id=7)
            assert record.client_id == 7

    def test_explicit_aliases(self):
        """Test aliases that mechanical conversion cannot produce."""
        assert LegalSecurity(client_id=1, has3aBeneficiary=True).has_3a_beneficiary is True
        assert Budget(client_id=1, taxesDA=True).taxes_da is True
        assert Pillar1(client_id=1, orderedIKStatementMan=True).ordered_ik_statement_man is True
        pension = Pension(client_id=1, orderIKStatement=True, review3a=True)
        assert pension.order_ik_statement is True
        assert pension.review_3a is True

        dumped = Budget(client_id=1, taxes_da=True).model_dump(by_alias=True)
        assert dumped["taxesDA"] is True
        assert "foodMan" in dumped

    def test_risk_score_bounds(self):
        """Test risk score must be between 1 and 10."""
        with pytest.raises(ValueError):
            RiskProfile(client_id=1, risk_score=11)


class TestTableRegistry:
    """Tests for the table registry."""

    def test_counts(self):
        """Test ten list kinds and twelve single-record kinds."""
        assert len(LIST_TABLES) == 10
        assert len(SINGLE_RECORD_TABLES) == 12
        assert len(TABLES_BY_NAME) == len(OWNED_TABLES) == 22

    def test_kinds_and_ordering(self):
        """Test kinds and list ordering columns."""
        assert TABLES_BY_NAME["goals"].kind == EntityKind.LIST
        assert TABLES_BY_NAME["goals"].order_by == ("target_year",)
        assert TABLES_BY_NAME["planned_actions"].order_by == ("priority",)
        assert TABLES_BY_NAME["bank_accounts"].order_by == ("created_at",)
        assert TABLES_BY_NAME["budget"].kind == EntityKind.SINGLE_RECORD


class TestDerivedModels:
    """Tests for net worth and export documents."""

    def test_breakdown_total(self):
        """Test breakdown total sums every category."""
        breakdown = NetWorthBreakdown(bank_accounts=3000, securities=500, pillar2=100)
        assert breakdown.total == 3600

    def test_breakdown_camel_case_keys(self):
        """Test breakdown serialises with camelCase keys."""
        dumped = NetWorthBreakdown().model_dump(by_alias=True)
        assert set(dumped) == {
            "bankAccounts",
            "securities",
            "realEstate",
            "otherAssets",
            "pillar2",
            "pillar3",
            "lifeInsurance",
        }

    def test_export_document_keys(self):
        """Test export JSON has the version 1 layout."""
        document = ClientExport(client=Client(id=1, first_name="Anna", last_name="Muster"))
        data = json.loads(document.to_json())

        assert list(data) == [
            "version",
            "exportDate",
            "client",
            "goals",
            "actions",
            "housing",
            "propertyInsurance",
            "healthInsurance",
            "legalSecurity",
            "taxOptimization",
            "investment",
            "pension",
            "budget",
            "preferences",
        ]
        assert data["version"] == 1
        assert data["client"]["firstName"] == "Anna"
        assert data["housing"] is None
        assert document.to_json().startswith('{\n  "version"')


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            description="Record created in goals",
        )
        assert event.event_type == AuditEventType.RECORD_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.record_updated("goals", 5, ["description"], client_id=2)
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "record_updated"
        assert log_dict["entity_id"] == "5"
        assert log_dict["client_id"] == "2"
        assert log_dict["details"]["fields"] == ["description"]

    def test_audit_event_round_trips_from_log_dict(self):
        """Test an event can be rebuilt from its stored form."""
        event = AuditEventBuilder.client_deleted(3, {"goals": 2})
        rebuilt = AuditEvent.model_validate(event.to_log_dict())
        assert rebuilt.event_id == event.event_id
        assert rebuilt.entity_id == 3
        assert rebuilt.severity == AuditSeverity.WARNING

    def test_audit_event_builder_record_deleted(self):
        """Test AuditEventBuilder.record_deleted for a missing row."""
        event = AuditEventBuilder.record_deleted("goals", 9, found=False)
        assert event.event_type == AuditEventType.RECORD_DELETED
        assert event.details == {"found": False}
        assert "no row" in event.description

    def test_audit_event_builder_storage_error(self):
        """Test AuditEventBuilder.storage_error."""
        event = AuditEventBuilder.storage_error("create", "disk full", table="goals")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"
        assert event.entity_type == "goals"
