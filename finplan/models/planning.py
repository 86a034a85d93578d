"""
Planning Models

Goals and planned actions (list entities), income details (list entity),
and the per-topic questionnaires that hold at most one row per client:
housing, property insurance, health insurance, legal security, tax
optimisation, investment, budget and follow-up preferences.

Defaults on the single-record models are what a freshly created row holds.
"""

from datetime import date
from enum import Enum
from typing import Literal, Optional

from pydantic import Field

from finplan.models.base import ClientOwnedRecord, Owner


# =============================================================================
# ENUMS
# =============================================================================

class GoalPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GoalStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ActionStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class IncomeType(str, Enum):
    SALARY = "salary"
    BONUS = "bonus"
    SELF_EMPLOYMENT = "self_employment"
    RENTAL = "rental"
    DIVIDENDS = "dividends"
    INTEREST = "interest"
    PENSION = "pension"
    ALIMONY = "alimony"
    CHILD_SUPPORT = "child_support"
    OTHER = "other"


class IncomeFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    ONE_TIME = "one_time"


class ContactPreference(str, Enum):
    """Informal ('du') or formal ('Sie') address."""
    DU = "du"
    SIE = "sie"


class PreferredDay(str, Enum):
    A = "A"
    B = "B"
    D = "D"


# =============================================================================
# GOALS & ACTIONS (list entities)
# =============================================================================

class Goal(ClientOwnedRecord):
    """A financial goal on the client's timeline."""

    description: str = Field(..., min_length=1)
    target_year: int = Field(
        ...,
        ge=0,
        description="Horizon in years (1, 2, 3, 5, 10, 20)"
    )
    estimated_cost: Optional[float] = None
    priority: GoalPriority = GoalPriority.MEDIUM
    status: GoalStatus = GoalStatus.PLANNED


class PlannedAction(ClientOwnedRecord):
    """An intended measure agreed with the client."""

    for_man: bool = False
    for_woman: bool = False
    priority: int
    goal: str
    action: str
    responsible: str
    deadline: Optional[date] = None
    status: ActionStatus = ActionStatus.PENDING


class IncomeDetail(ClientOwnedRecord):
    """One income stream."""

    owner: Owner
    income_type: IncomeType
    description: str
    amount: float
    frequency: IncomeFrequency
    is_taxable: bool = True
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


# =============================================================================
# QUESTIONNAIRES (single-record entities)
# =============================================================================

class Housing(ClientOwnedRecord):
    # Renting
    is_renter: bool = False
    monthly_rent: Optional[float] = None
    additional_costs: Optional[float] = None
    seeking_rent_reduction: bool = False

    # Ownership
    is_owner: bool = False
    property_type: Optional[str] = None
    has_mortgage: bool = False
    purchase_price: Optional[float] = None
    tax_value: Optional[float] = None
    debt: Optional[float] = None
    mortgage_bank: Optional[str] = None

    # Mortgage
    mortgage_type: Optional[str] = None
    mortgage_amount: Optional[float] = None
    mortgage_expiry: Optional[date] = None
    interest_rate: Optional[float] = None
    amortization_direct: bool = False
    amortization_indirect: bool = False
    amortization_amount: Optional[float] = None

    # Property
    acquired_date: Optional[date] = None
    imputed_rental_value: Optional[float] = None
    renovation_plans: Optional[str] = None
    utility_costs: Optional[float] = None

    # Home-ownership goal
    home_ownership_goal: Optional[str] = None
    target_date: Optional[date] = None
    target_price: Optional[float] = None


class PropertyInsurance(ClientOwnedRecord):
    """Liability, household contents, vehicle and legal protection cover."""

    has_private_liability: bool = False
    private_liability_man: Optional[str] = None
    private_liability_woman: Optional[str] = None

    has_household_contents: bool = False
    household_contents_man: Optional[str] = None
    household_contents_woman: Optional[str] = None

    has_vehicle: bool = False
    vehicle_man: Optional[str] = None
    vehicle_woman: Optional[str] = None

    has_legal_protection: bool = False
    legal_protection_man: Optional[str] = None
    legal_protection_woman: Optional[str] = None

    remarks: Optional[str] = None


class HealthInsurance(ClientOwnedRecord):
    """Basic (KVG) and supplementary (VVG) cover plus health questions."""

    kvg_provider_man: Optional[str] = None
    kvg_provider_woman: Optional[str] = None
    vvg_provider_man: Optional[str] = None
    vvg_provider_woman: Optional[str] = None

    franchise_man: Optional[float] = None
    franchise_woman: Optional[float] = None

    yearly_premium_man: Optional[float] = None
    yearly_premium_woman: Optional[float] = None

    # Premium reduction (IPV)
    ipv_man: Optional[float] = None
    ipv_woman: Optional[float] = None

    height_man: Optional[float] = None
    height_woman: Optional[float] = None
    weight_man: Optional[float] = None
    weight_woman: Optional[float] = None

    family_doctor_man: Optional[str] = None
    family_doctor_woman: Optional[str] = None

    is_smoker_man: bool = False
    is_smoker_woman: bool = False
    is_healthy_man: bool = True
    is_healthy_woman: bool = True

    # Last five years
    had_alternative_physio: bool = False
    had_accident: bool = False
    had_illness: bool = False
    had_psychologist: bool = False

    protection_goals: Optional[str] = None


class LegalSecurity(ClientOwnedRecord):
    """Which legal documents and beneficiary orders are in place."""

    has_advance_directive: bool = False
    has_patient_decree: bool = False
    has_cohabitation_agreement: bool = False
    has_will: bool = False
    has_beneficiary_order: bool = False
    has_pension_beneficiary: bool = False
    has_3a_beneficiary: bool = Field(default=False, alias="has3aBeneficiary")
    wants_service_package: bool = False

    legal_goals: Optional[str] = None


class TaxOptimization(ClientOwnedRecord):
    received_tax_statement: bool = False
    wants_service_package: bool = False

    tax_goals: Optional[str] = None

    taxable_income_man: Optional[float] = None
    taxable_income_woman: Optional[float] = None
    current_tax_burden: Optional[float] = None

    # Deductions
    pillar3a_contribution_man: Optional[float] = None
    pillar3a_contribution_woman: Optional[float] = None
    pension_fund_purchase: Optional[float] = None
    other_deductions: Optional[float] = None


class Investment(ClientOwnedRecord):
    """Yearly income, liquidity and invested assets of both partners."""

    income_man: Optional[float] = None
    income_woman: Optional[float] = None

    liquid_assets_man: Optional[float] = None
    liquid_assets_woman: Optional[float] = None

    investment_assets_man: Optional[float] = None
    investment_assets_woman: Optional[float] = None

    received_tax_statement: bool = False
    create_investment_profile: bool = False
    wants_asset_withdrawal: bool = False

    investment_goals: Optional[str] = None


# Monthly expense categories; each has a _man and a _woman column.
BUDGET_CATEGORIES = (
    "taxes",
    "food",
    "mobility",
    "communication",
    "clothing",
    "travel",
    "leisure",
    "credit",
)


class Budget(ClientOwnedRecord):
    """Monthly expenses per category and partner, plus the savings rate."""

    taxes_man: Optional[float] = None
    taxes_woman: Optional[float] = None
    # Taxes settled by direct debit
    taxes_da: bool = Field(default=False, alias="taxesDA")

    food_man: Optional[float] = None
    food_woman: Optional[float] = None

    mobility_man: Optional[float] = None
    mobility_woman: Optional[float] = None

    communication_man: Optional[float] = None
    communication_woman: Optional[float] = None

    clothing_man: Optional[float] = None
    clothing_woman: Optional[float] = None

    travel_man: Optional[float] = None
    travel_woman: Optional[float] = None

    leisure_man: Optional[float] = None
    leisure_woman: Optional[float] = None

    credit_man: Optional[float] = None
    credit_woman: Optional[float] = None

    savings_rate_man: Optional[float] = None
    savings_rate_woman: Optional[float] = None


class ClientPreferences(ClientOwnedRecord):
    """Follow-up appointment preferences and product interests."""

    follow_up_date: Optional[date] = None
    contact_preference: Optional[ContactPreference] = None
    preferred_day: Optional[PreferredDay] = None
    preferred_week: Optional[Literal[1, 2, 4]] = None
    is_birthday: Optional[bool] = None

    interested_in_housing: bool = False
    interested_in_protection: bool = False
    interested_in_silver: bool = False
    interested_in_gold: bool = False
    interested_in_platinum: bool = False
    interested_in_pension: bool = False
    interested_in_investment: bool = False

    personal_notes: Optional[str] = None
    sales_opportunities: Optional[str] = None
