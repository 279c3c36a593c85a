from __future__ import annotations

from typing import Optional

from ...application.dtos import ListResponse, RequestOptions
from ...application.resource_dtos import (
    CheckDepositsResponse,
    CreateTopUpDTO,
    CreateTransferDTO,
    ListTopUpsDTO,
    ListTransfersDTO,
    TopUp,
    Transfer,
    UpdateTopUpDTO,
    UpdateTransferDTO,
)
from .base import BaseResource, build_query


class TopUps(BaseResource):
    """Funds added to the platform balance from on-chain deposits."""

    def create(self, dto: CreateTopUpDTO, options: Optional[RequestOptions] = None) -> TopUp:
        data = self._http.post("/topups", dto.model_dump(exclude_none=True), options)
        return TopUp.model_validate(data)

    def retrieve(self, topup_id: str, options: Optional[RequestOptions] = None) -> TopUp:
        return TopUp.model_validate(self._http.get(f"/topups/{topup_id}", options=options))

    def update(
        self,
        topup_id: str,
        dto: UpdateTopUpDTO,
        options: Optional[RequestOptions] = None,
    ) -> TopUp:
        data = self._http.post(f"/topups/{topup_id}", dto.model_dump(exclude_unset=True), options)
        return TopUp.model_validate(data)

    def list(
        self,
        params: Optional[ListTopUpsDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> ListResponse[TopUp]:
        data = self._http.get("/topups", build_query(params), options)
        return ListResponse[TopUp].model_validate(data)

    def cancel(self, topup_id: str, options: Optional[RequestOptions] = None) -> TopUp:
        return TopUp.model_validate(self._http.post(f"/topups/{topup_id}/cancel", {}, options))

    def check_deposits(self, options: Optional[RequestOptions] = None) -> CheckDepositsResponse:
        """Ask the server to scan the deposit wallet and credit new top-ups."""
        data = self._http.post("/topups/check-deposits", {}, options)
        return CheckDepositsResponse.model_validate(data)


class Transfers(BaseResource):
    def create(
        self, dto: CreateTransferDTO, options: Optional[RequestOptions] = None
    ) -> Transfer:
        data = self._http.post("/transfers", dto.model_dump(exclude_none=True), options)
        return Transfer.model_validate(data)

    def retrieve(self, transfer_id: str, options: Optional[RequestOptions] = None) -> Transfer:
        return Transfer.model_validate(
            self._http.get(f"/transfers/{transfer_id}", options=options)
        )

    def update(
        self,
        transfer_id: str,
        dto: UpdateTransferDTO,
        options: Optional[RequestOptions] = None,
    ) -> Transfer:
        data = self._http.post(
            f"/transfers/{transfer_id}", dto.model_dump(exclude_unset=True), options
        )
        return Transfer.model_validate(data)

    def list(
        self,
        params: Optional[ListTransfersDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> ListResponse[Transfer]:
        data = self._http.get("/transfers", build_query(params), options)
        return ListResponse[Transfer].model_validate(data)
