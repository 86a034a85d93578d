"""Tests for planning calculators and display formatting."""

import pytest

from finplan.calculators import (
    budget_summary,
    compound_interest,
    required_monthly_savings,
    savings_plan,
)
from finplan.formatting import format_chf, format_number, format_percent
from finplan.models import Budget, Investment


class TestCompoundInterest:
    """Tests for compound_interest."""

    def test_yearly_compounding(self):
        """Test 100'000 at 5 % for 20 years."""
        result = compound_interest(100000, 5, 20)
        assert round(result.final_balance, 2) == 265329.77
        assert len(result.points) == 21
        assert result.points[0].balance == 100000
        assert result.total_return_percent == pytest.approx(165.32977, rel=1e-6)
        assert result.annualized_return_percent == pytest.approx(5.0)

    def test_monthly_compounding_grows_faster(self):
        yearly = compound_interest(10000, 3, 10)
        monthly = compound_interest(10000, 3, 10, compounds_per_year=12)
        assert monthly.final_balance > yearly.final_balance

    def test_zero_years(self):
        result = compound_interest(5000, 4, 0)
        assert result.final_balance == 5000
        assert result.annualized_return_percent == 0

    def test_invalid_input(self):
        with pytest.raises(ValueError):
            compound_interest(1000, 5, -1)
        with pytest.raises(ValueError):
            compound_interest(1000, 5, 10, compounds_per_year=0)


class TestSavingsPlan:
    """Tests for savings_plan."""

    def test_without_interest(self):
        result = savings_plan(1000, 100, 0, 2)
        assert result.final_balance == pytest.approx(3400)
        assert result.total_contributions == pytest.approx(3400)
        assert result.total_interest == pytest.approx(0)

    def test_with_interest(self):
        result = savings_plan(0, 500, 4, 10)
        assert result.total_contributions == pytest.approx(60000)
        assert result.total_interest > 0
        assert [point.year for point in result.points] == list(range(11))


class TestRequiredMonthlySavings:
    """Tests for required_monthly_savings."""

    def test_without_interest(self):
        """Test the remainder is spread evenly over the months."""
        result = required_monthly_savings(12000, 0, 0, 1)
        assert result.monthly_needed == pytest.approx(1000)
        assert result.already_achieved is False

    def test_goal_already_reached(self):
        result = required_monthly_savings(10000, 9000, 2, 10)
        assert result.already_achieved is True
        assert result.monthly_needed == 0
        assert result.future_value_of_current_savings > 10000

    def test_annuity_reaches_goal(self):
        """Test paying the computed amount into a savings plan hits the goal."""
        result = required_monthly_savings(100000, 20000, 3, 15)
        plan = savings_plan(20000, result.monthly_needed, 3, 15)
        assert plan.final_balance == pytest.approx(100000)

    def test_years_must_be_positive(self):
        with pytest.raises(ValueError):
            required_monthly_savings(1000, 0, 2, 0)


class TestBudgetSummary:
    """Tests for budget_summary."""

    def test_summary(self):
        budget = Budget(
            client_id=1,
            taxes_man=500,
            food_man=600,
            food_woman=400,
            savings_rate_man=300,
        )
        investment = Investment(client_id=1, income_man=60000, income_woman=36000)

        summary = budget_summary(budget, investment)

        assert summary.monthly_income == 8000
        assert summary.total_expenses == 1500
        assert summary.savings == 300
        assert summary.total_outflow == 1800
        assert summary.balance == 6200
        assert summary.savings_rate_percent == pytest.approx(3.75)

    def test_without_income(self):
        summary = budget_summary(Budget(client_id=1, food_man=100))
        assert summary.monthly_income == 0
        assert summary.balance == -100
        assert summary.savings_rate_percent == 0


class TestFormatting:
    """Tests for display formatting."""

    def test_format_chf(self):
        assert format_chf(265329.77) == "265’330 CHF"
        assert format_chf(999.5) == "1’000 CHF"
        assert format_chf(None) == "0 CHF"
        assert format_chf(-1234567) == "-1’234’567 CHF"

    def test_no_negative_zero(self):
        assert format_chf(-0.2) == "0 CHF"

    def test_format_number_places(self):
        assert format_number(1234.5678, places=2) == "1’234.57"
        assert format_number(2.5) == "3"

    def test_format_percent(self):
        assert format_percent(0.054) == "5%"
        assert format_percent(0.0555, places=1) == "5.6%"
        assert format_percent(None) == "0%"
