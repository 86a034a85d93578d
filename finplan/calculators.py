"""
Planning calculators.

Closed-form arithmetic over a few inputs, recomputed on demand. Results
are unrounded floats; finplan.formatting rounds for display.

Rates are given in percent (5 means 5 %).
"""

from typing import Optional

from pydantic import BaseModel, Field

from finplan.models.planning import BUDGET_CATEGORIES, Budget, Investment


class GrowthPoint(BaseModel):
    """Balance at the end of one year."""

    year: int
    balance: float
    contributions: float
    interest: float


class CompoundInterestResult(BaseModel):
    points: list[GrowthPoint]
    final_balance: float
    total_interest: float
    total_return_percent: float
    annualized_return_percent: float


class SavingsPlanResult(BaseModel):
    points: list[GrowthPoint]
    final_balance: float
    total_contributions: float
    total_interest: float


class RequiredSavingsResult(BaseModel):
    monthly_needed: float
    future_value_of_current_savings: float
    already_achieved: bool


class BudgetSummary(BaseModel):
    """Monthly view of a household budget."""

    monthly_income: float
    total_expenses: float
    savings: float
    total_outflow: float
    balance: float
    savings_rate_percent: float = Field(
        description="Savings as a share of income, 0 when there is no income"
    )


def compound_interest(
    principal: float,
    annual_rate_percent: float,
    years: int,
    compounds_per_year: int = 1,
) -> CompoundInterestResult:
    """
    Growth of a one-off investment.

    balance(year) = principal * (1 + rate / n) ** (year * n)

        >>> round(compound_interest(100000, 5, 20).final_balance, 2)
        265329.77
    """
    if compounds_per_year < 1:
        raise ValueError("compounds_per_year must be at least 1")
    if years < 0:
        raise ValueError("years must not be negative")

    periodic_rate = annual_rate_percent / 100 / compounds_per_year

    points = []
    for year in range(years + 1):
        balance = principal * (1 + periodic_rate) ** (year * compounds_per_year)
        points.append(
            GrowthPoint(
                year=year,
                balance=balance,
                contributions=principal,
                interest=balance - principal,
            )
        )

    final_balance = points[-1].balance
    total_interest = final_balance - principal

    if principal > 0:
        total_return = total_interest / principal * 100
        annualized = (
            ((final_balance / principal) ** (1 / years) - 1) * 100 if years > 0 else 0.0
        )
    else:
        total_return = 0.0
        annualized = 0.0

    return CompoundInterestResult(
        points=points,
        final_balance=final_balance,
        total_interest=total_interest,
        total_return_percent=total_return,
        annualized_return_percent=annualized,
    )


def savings_plan(
    initial_amount: float,
    monthly_contribution: float,
    annual_rate_percent: float,
    years: int,
) -> SavingsPlanResult:
    """
    Monthly savings plan, compounded monthly.

    Each month: balance = balance * (1 + rate / 12) + contribution
    """
    if years < 0:
        raise ValueError("years must not be negative")

    monthly_rate = annual_rate_percent / 100 / 12
    balance = initial_amount
    contributions = initial_amount

    points = [GrowthPoint(year=0, balance=balance, contributions=contributions, interest=0.0)]
    for year in range(1, years + 1):
        for _ in range(12):
            balance = balance * (1 + monthly_rate) + monthly_contribution
            contributions += monthly_contribution
        points.append(
            GrowthPoint(
                year=year,
                balance=balance,
                contributions=contributions,
                interest=balance - contributions,
            )
        )

    final = points[-1]
    return SavingsPlanResult(
        points=points,
        final_balance=final.balance,
        total_contributions=final.contributions,
        total_interest=final.interest,
    )


def required_monthly_savings(
    goal_amount: float,
    current_savings: float,
    annual_rate_percent: float,
    years: int,
) -> RequiredSavingsResult:
    """
    Monthly amount needed to reach a savings goal.

    Current savings grow at the monthly rate; the rest is covered by a
    level monthly payment (annuity formula). Without interest the rest is
    simply spread over the months.
    """
    if years <= 0:
        raise ValueError("years must be positive")

    monthly_rate = annual_rate_percent / 100 / 12
    months = years * 12

    growth = (1 + monthly_rate) ** months
    future_value = current_savings * growth
    remaining = goal_amount - future_value

    if remaining <= 0:
        return RequiredSavingsResult(
            monthly_needed=0.0,
            future_value_of_current_savings=future_value,
            already_achieved=True,
        )

    if monthly_rate == 0:
        monthly_needed = remaining / months
    else:
        monthly_needed = remaining * (monthly_rate / (growth - 1))

    return RequiredSavingsResult(
        monthly_needed=max(0.0, monthly_needed),
        future_value_of_current_savings=future_value,
        already_achieved=False,
    )


def budget_summary(
    budget: Budget,
    investment: Optional[Investment] = None,
) -> BudgetSummary:
    """
    Monthly income against expenses and savings.

    Income is the partners' yearly income (from the investment record)
    divided by twelve. Missing amounts count as zero.
    """
    yearly_income = 0.0
    if investment is not None:
        yearly_income = (investment.income_man or 0.0) + (investment.income_woman or 0.0)
    monthly_income = yearly_income / 12

    total_expenses = sum(
        (getattr(budget, f"{category}_{person}") or 0.0)
        for category in BUDGET_CATEGORIES
        for person in ("man", "woman")
    )
    savings = (budget.savings_rate_man or 0.0) + (budget.savings_rate_woman or 0.0)
    total_outflow = total_expenses + savings

    return BudgetSummary(
        monthly_income=monthly_income,
        total_expenses=total_expenses,
        savings=savings,
        total_outflow=total_outflow,
        balance=monthly_income - total_outflow,
        savings_rate_percent=savings / monthly_income * 100 if monthly_income > 0 else 0.0,
    )
