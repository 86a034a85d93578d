"""
Derived (non-persisted) models: net worth and the client export document.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from finplan.models.base import PlanningModel
from finplan.models.client import Client
from finplan.models.pension import Pension
from finplan.models.planning import (
    Budget,
    ClientPreferences,
    Goal,
    HealthInsurance,
    Housing,
    Investment,
    LegalSecurity,
    PlannedAction,
    PropertyInsurance,
    TaxOptimization,
)


class NetWorthBreakdown(PlanningModel):
    """Asset totals per category."""

    bank_accounts: float = 0.0
    securities: float = 0.0
    real_estate: float = 0.0
    other_assets: float = 0.0
    pillar2: float = 0.0
    pillar3: float = 0.0
    life_insurance: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.bank_accounts
            + self.securities
            + self.real_estate
            + self.other_assets
            + self.pillar2
            + self.pillar3
            + self.life_insurance
        )


class NetWorth(PlanningModel):
    """
    Aggregated assets and liabilities of one client.

    Amounts are unrounded floats; rounding happens at display time.
    """

    total_assets: float
    total_liabilities: float
    net_worth: float
    breakdown: NetWorthBreakdown


EXPORT_FORMAT_VERSION = 1


class ClientExport(PlanningModel):
    """
    Flat JSON snapshot of one client.

    Single records that were never created are null.
    """

    version: int = EXPORT_FORMAT_VERSION
    export_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    client: Client
    goals: list[Goal] = Field(default_factory=list)
    actions: list[PlannedAction] = Field(default_factory=list)
    housing: Optional[Housing] = None
    property_insurance: Optional[PropertyInsurance] = None
    health_insurance: Optional[HealthInsurance] = None
    legal_security: Optional[LegalSecurity] = None
    tax_optimization: Optional[TaxOptimization] = None
    investment: Optional[Investment] = None
    pension: Optional[Pension] = None
    budget: Optional[Budget] = None
    preferences: Optional[ClientPreferences] = None

    def to_json(self) -> str:
        """Serialise with camelCase keys and two-space indentation."""
        return self.model_dump_json(by_alias=True, indent=2)
