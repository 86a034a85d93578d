"""
Pension, Insurance & Risk Models

Covers the three-pillar pension system (1st pillar AHV/IV, 2nd pillar
pension fund, 3rd pillar 3a/3b accounts), the retirement/disability needs
summary, life insurance policies and the investor risk profile.

Pillar1, Pillar2, Pension and RiskProfile are single-record entities;
Pillar3Account and LifeInsurance are list entities.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field

from finplan.models.base import ClientOwnedRecord, Person


# =============================================================================
# ENUMS
# =============================================================================

class PillarType(str, Enum):
    PILLAR_3A = "3a"
    PILLAR_3B = "3b"


class Pillar3ProductType(str, Enum):
    BANK_ACCOUNT = "bank_account"
    INSURANCE = "insurance"
    FUND = "fund"
    ETF = "etf"


class LifeInsuranceType(str, Enum):
    TERM_LIFE = "term_life"
    WHOLE_LIFE = "whole_life"
    ENDOWMENT = "endowment"
    DISABILITY = "disability"
    COMBINED = "combined"


class PremiumFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class ReactionToLoss(str, Enum):
    SELL_ALL = "sell_all"
    SELL_SOME = "sell_some"
    HOLD = "hold"
    BUY_MORE = "buy_more"


class InvestmentHorizon(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    VERY_LONG = "very_long"


class IncomeStability(str, Enum):
    VERY_STABLE = "very_stable"
    STABLE = "stable"
    VARIABLE = "variable"
    UNCERTAIN = "uncertain"


class LiquidityNeeds(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskCategory(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE_CONSERVATIVE = "moderate_conservative"
    BALANCED = "balanced"
    MODERATE_AGGRESSIVE = "moderate_aggressive"
    AGGRESSIVE = "aggressive"


# =============================================================================
# 1ST PILLAR - AHV/IV
# =============================================================================

class Pillar1(ClientOwnedRecord):
    """State pension contribution record for both partners."""

    # Man
    contribution_years_man: Optional[int] = Field(default=None, ge=0)
    average_income_man: Optional[float] = None
    expected_ahv_pension_man: Optional[float] = None
    has_contribution_gaps_man: Optional[bool] = None
    gap_years_man: Optional[str] = None

    # Woman
    contribution_years_woman: Optional[int] = Field(default=None, ge=0)
    average_income_woman: Optional[float] = None
    expected_ahv_pension_woman: Optional[float] = None
    has_contribution_gaps_woman: Optional[bool] = None
    gap_years_woman: Optional[str] = None

    # Individual account (IK) statement
    ordered_ik_statement_man: Optional[bool] = Field(
        default=None, alias="orderedIKStatementMan"
    )
    ordered_ik_statement_woman: Optional[bool] = Field(
        default=None, alias="orderedIKStatementWoman"
    )
    ik_statement_date_man: Optional[date] = None
    ik_statement_date_woman: Optional[date] = None

    notes: Optional[str] = None


# =============================================================================
# 2ND PILLAR - BVG / PENSION FUND
# =============================================================================

class Pillar2(ClientOwnedRecord):
    """
    Occupational pension fund details.

    The current balances count towards net worth.
    """

    # Man
    pension_fund_man: Optional[str] = None
    insured_salary_man: Optional[float] = None
    current_balance_man: Optional[float] = None
    projected_pension_man: Optional[float] = None
    projected_capital_man: Optional[float] = None
    conversion_rate_man: Optional[float] = None
    max_voluntary_purchase_man: Optional[float] = None
    disability_pension_man: Optional[float] = None
    spouse_pension_man: Optional[float] = None
    child_pension_man: Optional[float] = None
    death_capital_man: Optional[float] = None
    early_retirement_possible_man: Optional[bool] = None
    earliest_retirement_age_man: Optional[int] = None

    # Woman
    pension_fund_woman: Optional[str] = None
    insured_salary_woman: Optional[float] = None
    current_balance_woman: Optional[float] = None
    projected_pension_woman: Optional[float] = None
    projected_capital_woman: Optional[float] = None
    conversion_rate_woman: Optional[float] = None
    max_voluntary_purchase_woman: Optional[float] = None
    disability_pension_woman: Optional[float] = None
    spouse_pension_woman: Optional[float] = None
    child_pension_woman: Optional[float] = None
    death_capital_woman: Optional[float] = None
    early_retirement_possible_woman: Optional[bool] = None
    earliest_retirement_age_woman: Optional[int] = None

    # Documents
    received_pension_statement_man: Optional[bool] = None
    received_pension_statement_woman: Optional[bool] = None
    statement_date_man: Optional[date] = None
    statement_date_woman: Optional[date] = None

    notes: Optional[str] = None


# =============================================================================
# 3RD PILLAR - 3A / 3B
# =============================================================================

class Pillar3Account(ClientOwnedRecord):
    """A private pension account or policy."""

    owner: Person
    pillar_type: PillarType
    provider: str
    product_type: Pillar3ProductType
    account_number: Optional[str] = None
    start_date: Optional[date] = None
    current_value: float
    yearly_contribution: Optional[float] = None
    interest_rate: Optional[float] = None
    investment_strategy: Optional[str] = None
    beneficiaries: Optional[str] = None
    notes: Optional[str] = None


# =============================================================================
# PENSION NEEDS SUMMARY
# =============================================================================

class Pension(ClientOwnedRecord):
    """Disability/death cover and retirement targets for both partners."""

    # Disability / death cover
    pillar1_average_income_man: Optional[float] = None
    pillar1_average_income_woman: Optional[float] = None
    pillar2_amount_man: Optional[float] = None
    pillar2_amount_woman: Optional[float] = None
    disability_need_man: Optional[float] = None
    disability_need_woman: Optional[float] = None
    death_need_man: Optional[float] = None
    death_need_woman: Optional[float] = None

    # Retirement planning
    target_retirement_age_man: Optional[int] = None
    target_retirement_age_woman: Optional[int] = None
    retirement_need_man: Optional[float] = None
    retirement_need_woman: Optional[float] = None

    order_ik_statement: bool = Field(default=False, alias="orderIKStatement")

    # Reviews
    review_pension_fund: bool = False
    review_3a: bool = Field(default=False, alias="review3a")
    review_3b: bool = Field(default=False, alias="review3b")


# =============================================================================
# LIFE INSURANCE
# =============================================================================

class LifeInsurance(ClientOwnedRecord):
    """
    A life or disability policy.

    The surrender value counts towards net worth.
    """

    owner: Person
    insurance_type: LifeInsuranceType
    provider: str
    policy_number: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    premium: float = Field(..., ge=0)
    premium_frequency: PremiumFrequency
    sum_insured_death: Optional[float] = None
    sum_insured_disability: Optional[float] = None
    current_surrender_value: Optional[float] = None
    beneficiaries: Optional[str] = None
    is_pledged: Optional[bool] = None
    pledged_to: Optional[str] = None
    notes: Optional[str] = None


# =============================================================================
# RISK PROFILE
# =============================================================================

class RiskProfile(ClientOwnedRecord):
    """Investment experience, risk tolerance answers and resulting profile."""

    # Experience
    investment_experience_years: Optional[int] = Field(default=None, ge=0)
    has_stock_experience: Optional[bool] = None
    has_bond_experience: Optional[bool] = None
    has_fund_experience: Optional[bool] = None
    has_derivative_experience: Optional[bool] = None

    # Risk tolerance
    reaction_to_loss: Optional[ReactionToLoss] = None
    investment_horizon: Optional[InvestmentHorizon] = None
    income_stability: Optional[IncomeStability] = None
    liquidity_needs: Optional[LiquidityNeeds] = None
    max_acceptable_loss: Optional[float] = Field(
        default=None,
        description="Maximum acceptable loss in percent"
    )

    # Profile
    risk_score: Optional[int] = Field(default=None, ge=1, le=10)
    risk_category: Optional[RiskCategory] = None
    recommended_stock_allocation: Optional[float] = None
    recommended_bond_allocation: Optional[float] = None
    recommended_cash_allocation: Optional[float] = None

    assessment_date: Optional[date] = None
    notes: Optional[str] = None
