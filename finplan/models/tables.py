"""
Table registry.

Single source of truth for which model lives in which table, whether the
table holds many rows per client or at most one, and how lists are ordered.
Both storage backends and the repositories are driven from here.
"""

from enum import Enum
from typing import NamedTuple

from finplan.models.assets import (
    BankAccount,
    Liability,
    OtherAsset,
    RealEstate,
    SecurityHolding,
)
from finplan.models.base import ClientOwnedRecord
from finplan.models.pension import (
    LifeInsurance,
    Pension,
    Pillar1,
    Pillar2,
    Pillar3Account,
    RiskProfile,
)
from finplan.models.planning import (
    Budget,
    ClientPreferences,
    Goal,
    HealthInsurance,
    Housing,
    IncomeDetail,
    Investment,
    LegalSecurity,
    PlannedAction,
    PropertyInsurance,
    TaxOptimization,
)


CLIENTS_TABLE = "clients"
AUDIT_TABLE = "audit_events"


class EntityKind(str, Enum):
    LIST = "list"
    SINGLE_RECORD = "single_record"


class EntityTable(NamedTuple):
    name: str
    model: type[ClientOwnedRecord]
    kind: EntityKind
    order_by: tuple[str, ...] = ("created_at",)


LIST_TABLES: tuple[EntityTable, ...] = (
    EntityTable("goals", Goal, EntityKind.LIST, ("target_year",)),
    EntityTable("planned_actions", PlannedAction, EntityKind.LIST, ("priority",)),
    EntityTable("bank_accounts", BankAccount, EntityKind.LIST),
    EntityTable("securities", SecurityHolding, EntityKind.LIST),
    EntityTable("real_estate", RealEstate, EntityKind.LIST),
    EntityTable("other_assets", OtherAsset, EntityKind.LIST),
    EntityTable("liabilities", Liability, EntityKind.LIST),
    EntityTable("pillar3_accounts", Pillar3Account, EntityKind.LIST),
    EntityTable("life_insurance", LifeInsurance, EntityKind.LIST),
    EntityTable("income_details", IncomeDetail, EntityKind.LIST),
)

SINGLE_RECORD_TABLES: tuple[EntityTable, ...] = (
    EntityTable("housing", Housing, EntityKind.SINGLE_RECORD),
    EntityTable("property_insurance", PropertyInsurance, EntityKind.SINGLE_RECORD),
    EntityTable("health_insurance", HealthInsurance, EntityKind.SINGLE_RECORD),
    EntityTable("legal_security", LegalSecurity, EntityKind.SINGLE_RECORD),
    EntityTable("tax_optimization", TaxOptimization, EntityKind.SINGLE_RECORD),
    EntityTable("investment", Investment, EntityKind.SINGLE_RECORD),
    EntityTable("pension", Pension, EntityKind.SINGLE_RECORD),
    EntityTable("budget", Budget, EntityKind.SINGLE_RECORD),
    EntityTable("client_preferences", ClientPreferences, EntityKind.SINGLE_RECORD),
    EntityTable("pillar1", Pillar1, EntityKind.SINGLE_RECORD),
    EntityTable("pillar2", Pillar2, EntityKind.SINGLE_RECORD),
    EntityTable("risk_profiles", RiskProfile, EntityKind.SINGLE_RECORD),
)

OWNED_TABLES: tuple[EntityTable, ...] = LIST_TABLES + SINGLE_RECORD_TABLES

TABLES_BY_NAME: dict[str, EntityTable] = {table.name: table for table in OWNED_TABLES}
