from __future__ import annotations

from typing import Optional

from ...application.dtos import ListResponse, RequestOptions
from ...application.resource_dtos import (
    Balance,
    BalanceTransaction,
    ListBalanceTransactionsDTO,
)
from .base import BaseResource, build_query


class BalanceResource(BaseResource):
    def retrieve(self, options: Optional[RequestOptions] = None) -> Balance:
        return Balance.model_validate(self._http.get("/balance", options=options))


class BalanceTransactions(BaseResource):
    def retrieve(
        self, transaction_id: str, options: Optional[RequestOptions] = None
    ) -> BalanceTransaction:
        data = self._http.get(f"/balance_transactions/{transaction_id}", options=options)
        return BalanceTransaction.model_validate(data)

    def list(
        self,
        params: Optional[ListBalanceTransactionsDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> ListResponse[BalanceTransaction]:
        data = self._http.get("/balance_transactions", build_query(params), options)
        return ListResponse[BalanceTransaction].model_validate(data)
