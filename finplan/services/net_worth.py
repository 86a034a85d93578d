"""
Net-worth aggregation.

Read-only: sums a client's assets and liabilities on demand. Nothing is
stored. Amounts stay unrounded floats; rounding is a display concern
(see finplan.formatting).
"""

import asyncio
from typing import Iterable, Optional

from finplan.audit import AuditLogger
from finplan.models.base import EntityId
from finplan.models.summary import NetWorth, NetWorthBreakdown
from finplan.models.tables import TABLES_BY_NAME
from finplan.services.repositories import ListRepository, SingleRecordRepository
from finplan.services.storage import StorageBackend


def _total(values: Iterable[Optional[float]]) -> float:
    """Sum, counting missing amounts as zero."""
    return sum((value or 0.0 for value in values), 0.0)


class NetWorthCalculator:
    """Aggregates assets and liabilities across every tracked category."""

    def __init__(
        self,
        backend: StorageBackend,
        audit_logger: Optional[AuditLogger] = None,
    ):
        def list_repo(name: str) -> ListRepository:
            return ListRepository(backend, TABLES_BY_NAME[name], audit_logger)

        self._bank_accounts = list_repo("bank_accounts")
        self._securities = list_repo("securities")
        self._real_estate = list_repo("real_estate")
        self._other_assets = list_repo("other_assets")
        self._liabilities = list_repo("liabilities")
        self._pillar3 = list_repo("pillar3_accounts")
        self._life_insurance = list_repo("life_insurance")
        self._pillar2 = SingleRecordRepository(
            backend, TABLES_BY_NAME["pillar2"], audit_logger
        )

    async def calculate(self, client_id: EntityId) -> NetWorth:
        """
        Fetch every asset and liability list concurrently and sum them.

        Pillar 2 counts both partners' current balances; life insurances
        count their surrender value.
        """
        (
            bank_accounts,
            securities,
            real_estate,
            other_assets,
            liabilities,
            pillar2,
            pillar3,
            life_insurance,
        ) = await asyncio.gather(
            self._bank_accounts.get_by_client_id(client_id),
            self._securities.get_by_client_id(client_id),
            self._real_estate.get_by_client_id(client_id),
            self._other_assets.get_by_client_id(client_id),
            self._liabilities.get_by_client_id(client_id),
            self._pillar2.get_by_client_id(client_id),
            self._pillar3.get_by_client_id(client_id),
            self._life_insurance.get_by_client_id(client_id),
        )

        breakdown = NetWorthBreakdown(
            bank_accounts=_total(a.balance for a in bank_accounts),
            securities=_total(s.current_value for s in securities),
            real_estate=_total(r.current_value for r in real_estate),
            other_assets=_total(o.current_value for o in other_assets),
            pillar2=_total([pillar2.current_balance_man, pillar2.current_balance_woman]),
            pillar3=_total(p.current_value for p in pillar3),
            life_insurance=_total(i.current_surrender_value for i in life_insurance),
        )

        total_assets = breakdown.total
        total_liabilities = _total(liability.current_balance for liability in liabilities)

        return NetWorth(
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            net_worth=total_assets - total_liabilities,
            breakdown=breakdown,
        )
