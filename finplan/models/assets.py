"""
Asset & Liability Models

List entities: a client may hold any number of each. Their sums feed the
net-worth calculation.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field

from finplan.models.base import ClientOwnedRecord, EntityId, Owner


# =============================================================================
# ENUMS
# =============================================================================

class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    SALARY = "salary"
    OTHER = "other"


class InvestmentType(str, Enum):
    STOCKS = "stocks"
    BONDS = "bonds"
    FUNDS = "funds"
    ETF = "etf"
    STRUCTURED = "structured"
    CRYPTO = "crypto"
    OTHER = "other"


class PropertyType(str, Enum):
    HOUSE = "house"
    APARTMENT = "apartment"
    LAND = "land"
    COMMERCIAL = "commercial"
    VACATION = "vacation"
    OTHER = "other"


class OtherAssetType(str, Enum):
    VEHICLE = "vehicle"
    ART = "art"
    JEWELRY = "jewelry"
    COLLECTIBLES = "collectibles"
    BUSINESS = "business"
    LOAN_RECEIVABLE = "loan_receivable"
    OTHER = "other"


class LiabilityType(str, Enum):
    MORTGAGE = "mortgage"
    PERSONAL_LOAN = "personal_loan"
    CAR_LOAN = "car_loan"
    CREDIT_CARD = "credit_card"
    STUDENT_LOAN = "student_loan"
    BUSINESS_LOAN = "business_loan"
    OTHER = "other"


# =============================================================================
# ASSETS
# =============================================================================

class BankAccount(ClientOwnedRecord):
    """A bank account and its balance."""

    owner: Owner
    bank_name: str = Field(..., min_length=1)
    account_type: AccountType
    iban: Optional[str] = None
    balance: float
    interest_rate: Optional[float] = None
    notes: Optional[str] = None


class SecurityHolding(ClientOwnedRecord):
    """A position held at a custodian bank."""

    owner: Owner
    custodian_bank: str
    investment_type: InvestmentType
    description: str
    quantity: Optional[float] = None
    purchase_price: Optional[float] = None
    current_value: float
    purchase_date: Optional[date] = None
    currency: str = Field(default="CHF", min_length=3, max_length=3)
    notes: Optional[str] = None


class RealEstate(ClientOwnedRecord):
    """A property, including the client's own residence."""

    owner: Owner
    property_type: PropertyType
    address: str
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = None
    current_value: float
    tax_value: Optional[float] = None
    imputed_rental_value: Optional[float] = None
    rental_income: Optional[float] = None
    is_own_residence: bool = False
    notes: Optional[str] = None


class OtherAsset(ClientOwnedRecord):
    """Vehicles, valuables, business stakes and the like."""

    owner: Owner
    asset_type: OtherAssetType
    description: str
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = None
    current_value: float
    notes: Optional[str] = None


# =============================================================================
# LIABILITIES
# =============================================================================

class Liability(ClientOwnedRecord):
    """A debt. Mortgages may point at the real-estate row they finance."""

    owner: Owner
    liability_type: LiabilityType
    creditor: str
    original_amount: float
    current_balance: float
    interest_rate: float
    monthly_payment: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    linked_asset_id: Optional[EntityId] = None
    notes: Optional[str] = None
