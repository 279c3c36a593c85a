from __future__ import annotations

from typing import Optional

from ...application.account_dtos import (
    Account,
    AccountLink,
    CreateAccountDTO,
    CreateAccountLinkDTO,
    CreateExternalWalletDTO,
    CreatePersonDTO,
    ExternalWallet,
    ListAccountsDTO,
    ListExternalWalletsDTO,
    ListPersonsDTO,
    LoginLink,
    Person,
    RejectAccountDTO,
    UpdateAccountDTO,
    UpdateExternalWalletDTO,
    UpdatePersonDTO,
)
from ...application.dtos import DeletedResponse, ListResponse, RequestOptions
from ..http.http_client import HttpClient
from .base import BaseResource, build_query


class ExternalAccounts(BaseResource):
    """External wallets attached to a connected account."""

    def create(
        self,
        account_id: str,
        dto: CreateExternalWalletDTO,
        options: Optional[RequestOptions] = None,
    ) -> ExternalWallet:
        data = self._http.post(
            f"/accounts/{account_id}/external_accounts",
            dto.model_dump(exclude_none=True),
            options,
        )
        return ExternalWallet.model_validate(data)

    def retrieve(
        self, account_id: str, wallet_id: str, options: Optional[RequestOptions] = None
    ) -> ExternalWallet:
        data = self._http.get(
            f"/accounts/{account_id}/external_accounts/{wallet_id}", options=options
        )
        return ExternalWallet.model_validate(data)

    def update(
        self,
        account_id: str,
        wallet_id: str,
        dto: UpdateExternalWalletDTO,
        options: Optional[RequestOptions] = None,
    ) -> ExternalWallet:
        data = self._http.post(
            f"/accounts/{account_id}/external_accounts/{wallet_id}",
            dto.model_dump(exclude_unset=True),
            options,
        )
        return ExternalWallet.model_validate(data)

    def delete(
        self, account_id: str, wallet_id: str, options: Optional[RequestOptions] = None
    ) -> DeletedResponse:
        data = self._http.delete(
            f"/accounts/{account_id}/external_accounts/{wallet_id}", options
        )
        return DeletedResponse.model_validate(data)

    def list(
        self,
        account_id: str,
        params: Optional[ListExternalWalletsDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> ListResponse[ExternalWallet]:
        data = self._http.get(
            f"/accounts/{account_id}/external_accounts", build_query(params), options
        )
        return ListResponse[ExternalWallet].model_validate(data)


class Persons(BaseResource):
    """Representatives, owners and directors of a connected account."""

    def create(
        self,
        account_id: str,
        dto: Optional[CreatePersonDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> Person:
        body = dto.model_dump(exclude_none=True) if dto else {}
        data = self._http.post(f"/accounts/{account_id}/persons", body, options)
        return Person.model_validate(data)

    def retrieve(
        self, account_id: str, person_id: str, options: Optional[RequestOptions] = None
    ) -> Person:
        data = self._http.get(f"/accounts/{account_id}/persons/{person_id}", options=options)
        return Person.model_validate(data)

    def update(
        self,
        account_id: str,
        person_id: str,
        dto: UpdatePersonDTO,
        options: Optional[RequestOptions] = None,
    ) -> Person:
        data = self._http.post(
            f"/accounts/{account_id}/persons/{person_id}",
            dto.model_dump(exclude_unset=True),
            options,
        )
        return Person.model_validate(data)

    def delete(
        self, account_id: str, person_id: str, options: Optional[RequestOptions] = None
    ) -> DeletedResponse:
        data = self._http.delete(f"/accounts/{account_id}/persons/{person_id}", options)
        return DeletedResponse.model_validate(data)

    def list(
        self,
        account_id: str,
        params: Optional[ListPersonsDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> ListResponse[Person]:
        data = self._http.get(
            f"/accounts/{account_id}/persons", build_query(params), options
        )
        return ListResponse[Person].model_validate(data)


class LoginLinks(BaseResource):
    def create(
        self, account_id: str, options: Optional[RequestOptions] = None
    ) -> LoginLink:
        data = self._http.post(f"/accounts/{account_id}/login_links", {}, options)
        return LoginLink.model_validate(data)


class AccountLinks(BaseResource):
    def create(
        self, dto: CreateAccountLinkDTO, options: Optional[RequestOptions] = None
    ) -> AccountLink:
        data = self._http.post("/account_links", dto.model_dump(), options)
        return AccountLink.model_validate(data)


class Accounts(BaseResource):
    """Connected accounts, with their wallets, persons and login links nested."""

    def __init__(self, http: HttpClient) -> None:
        super().__init__(http)
        self.external_accounts = ExternalAccounts(http)
        self.persons = Persons(http)
        self.login_links = LoginLinks(http)

    def create(
        self,
        dto: Optional[CreateAccountDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> Account:
        body = dto.model_dump(exclude_none=True) if dto else {}
        return Account.model_validate(self._http.post("/accounts", body, options))

    def retrieve(self, account_id: str, options: Optional[RequestOptions] = None) -> Account:
        return Account.model_validate(self._http.get(f"/accounts/{account_id}", options=options))

    def retrieve_me(self, options: Optional[RequestOptions] = None) -> Account:
        """Retrieve the account that owns the API key."""
        return Account.model_validate(self._http.get("/accounts/me", options=options))

    def update(
        self,
        account_id: str,
        dto: UpdateAccountDTO,
        options: Optional[RequestOptions] = None,
    ) -> Account:
        data = self._http.post(
            f"/accounts/{account_id}", dto.model_dump(exclude_unset=True), options
        )
        return Account.model_validate(data)

    def delete(
        self, account_id: str, options: Optional[RequestOptions] = None
    ) -> DeletedResponse:
        return DeletedResponse.model_validate(
            self._http.delete(f"/accounts/{account_id}", options)
        )

    def list(
        self,
        params: Optional[ListAccountsDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> ListResponse[Account]:
        data = self._http.get("/accounts", build_query(params), options)
        return ListResponse[Account].model_validate(data)

    def reject(
        self,
        account_id: str,
        dto: RejectAccountDTO,
        options: Optional[RequestOptions] = None,
    ) -> Account:
        data = self._http.post(f"/accounts/{account_id}/reject", dto.model_dump(), options)
        return Account.model_validate(data)
