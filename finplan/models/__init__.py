"""
Data Models Package

Pydantic models for every record kind, the derived net-worth and export
documents, audit events, and the table registry.
"""

from finplan.models.base import (
    ClientOwnedRecord,
    EntityId,
    Owner,
    Person,
    PlanningModel,
)
from finplan.models.client import Client, MaritalStatus
from finplan.models.assets import (
    AccountType,
    BankAccount,
    InvestmentType,
    Liability,
    LiabilityType,
    OtherAsset,
    OtherAssetType,
    PropertyType,
    RealEstate,
    SecurityHolding,
)
from finplan.models.pension import (
    LifeInsurance,
    LifeInsuranceType,
    Pension,
    Pillar1,
    Pillar2,
    Pillar3Account,
    Pillar3ProductType,
    PillarType,
    PremiumFrequency,
    RiskCategory,
    RiskProfile,
)
from finplan.models.planning import (
    ActionStatus,
    Budget,
    ClientPreferences,
    Goal,
    GoalPriority,
    GoalStatus,
    HealthInsurance,
    Housing,
    IncomeDetail,
    IncomeFrequency,
    IncomeType,
    Investment,
    LegalSecurity,
    PlannedAction,
    PropertyInsurance,
    TaxOptimization,
)
from finplan.models.summary import ClientExport, NetWorth, NetWorthBreakdown
from finplan.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from finplan.models.tables import (
    AUDIT_TABLE,
    CLIENTS_TABLE,
    LIST_TABLES,
    OWNED_TABLES,
    SINGLE_RECORD_TABLES,
    TABLES_BY_NAME,
    EntityKind,
    EntityTable,
)

__all__ = [
    # Base
    "ClientOwnedRecord",
    "EntityId",
    "Owner",
    "Person",
    "PlanningModel",
    # Client
    "Client",
    "MaritalStatus",
    # Assets
    "AccountType",
    "BankAccount",
    "InvestmentType",
    "Liability",
    "LiabilityType",
    "OtherAsset",
    "OtherAssetType",
    "PropertyType",
    "RealEstate",
    "SecurityHolding",
    # Pension & insurance
    "LifeInsurance",
    "LifeInsuranceType",
    "Pension",
    "Pillar1",
    "Pillar2",
    "Pillar3Account",
    "Pillar3ProductType",
    "PillarType",
    "PremiumFrequency",
    "RiskCategory",
    "RiskProfile",
    # Planning
    "ActionStatus",
    "Budget",
    "ClientPreferences",
    "Goal",
    "GoalPriority",
    "GoalStatus",
    "HealthInsurance",
    "Housing",
    "IncomeDetail",
    "IncomeFrequency",
    "IncomeType",
    "Investment",
    "LegalSecurity",
    "PlannedAction",
    "PropertyInsurance",
    "TaxOptimization",
    # Derived
    "ClientExport",
    "NetWorth",
    "NetWorthBreakdown",
    # Audit
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Tables
    "AUDIT_TABLE",
    "CLIENTS_TABLE",
    "LIST_TABLES",
    "OWNED_TABLES",
    "SINGLE_RECORD_TABLES",
    "TABLES_BY_NAME",
    "EntityKind",
    "EntityTable",
]
