"""
Client Model

The client is the financial-planning subject (a person or a couple).
Every other record is owned by exactly one client; deleting the client
deletes everything it owns.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from finplan.models.base import EntityId, PlanningModel


class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    REGISTERED_PARTNERSHIP = "registered_partnership"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


# Boolean planning-goal flags, in form order.
OPTIMISATION_GOALS = (
    "avoid_double_insurance",
    "close_coverage_gaps",
    "save_taxes",
    "increase_returns",
    "secure_partner",
)
PLANNING_GOALS = (
    "financial_security",
    "wealth_building",
    "retirement_planning",
    "saving_for_children",
    "home_ownership",
)


class Client(PlanningModel):
    """
    Identity, demographics, planning-goal flags and notes of one client.
    """

    # Identity
    id: Optional[EntityId] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    advisor_id: Optional[str] = Field(
        default=None,
        description="Advisor that manages this client (hosted backend only)"
    )

    # Personal info
    first_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    last_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    partner_first_name: Optional[str] = None
    partner_last_name: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    birth_date: Optional[date] = None
    partner_birth_date: Optional[date] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    # Employment
    occupation_man: Optional[str] = None
    occupation_woman: Optional[str] = None
    employer_man: Optional[str] = None
    employer_woman: Optional[str] = None
    employment_rate_man: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        description="Employment rate in percent"
    )
    employment_rate_woman: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        description="Employment rate in percent"
    )

    # Marital status
    marital_status: Optional[MaritalStatus] = None
    has_children: Optional[bool] = None
    number_of_children: Optional[int] = Field(default=None, ge=0)
    children_ages: Optional[str] = None

    # Planning goals (optimisation)
    avoid_double_insurance: bool = False
    close_coverage_gaps: bool = False
    save_taxes: bool = False
    increase_returns: bool = False
    secure_partner: bool = False

    # Planning goals (planning)
    financial_security: bool = False
    wealth_building: bool = False
    retirement_planning: bool = False
    saving_for_children: bool = False
    home_ownership: bool = False

    notes: Optional[str] = None

    @property
    def display_name(self) -> str:
        """'Last, First' plus the partner's first name when there is one."""
        name = f"{self.last_name}, {self.first_name}"
        if self.partner_first_name:
            name += f" & {self.partner_first_name}"
        return name

    @property
    def selected_goals(self) -> list[str]:
        """Names of the planning-goal flags that are set."""
        return [
            goal for goal in OPTIMISATION_GOALS + PLANNING_GOALS
            if getattr(self, goal)
        ]
