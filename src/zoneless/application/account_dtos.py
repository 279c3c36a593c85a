"""Data Transfer Objects for connected accounts and their nested objects."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .dtos import ApiObject, ListParams, RangeFilter


class Account(ApiObject):
    """A connected account. Nested settings are kept as plain dicts."""

    id: str
    object: Literal["account"] = "account"
    type: Optional[str] = None
    email: Optional[str] = None
    country: Optional[str] = None
    default_currency: Optional[str] = None
    charges_enabled: bool = False
    payouts_enabled: bool = False
    details_submitted: bool = False
    created: Optional[int] = None
    metadata: Dict[str, str] = Field(default_factory=dict)
    business_profile: Optional[Dict[str, Any]] = None
    capabilities: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    controller: Optional[Dict[str, Any]] = None


class CreateAccountDTO(BaseModel):
    """Create a connected account.

    Nested objects (``business_profile``, ``capabilities``, ``controller``,
    ``settings``, ``tos_acceptance``) are passed through as given.
    """

    model_config = ConfigDict(extra="allow")

    type: Optional[Literal["standard", "express", "custom", "none"]] = None
    email: Optional[str] = None
    country: Optional[str] = None
    default_currency: Optional[str] = Field(default=None, min_length=1)
    metadata: Optional[Dict[str, str]] = None


class UpdateAccountDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    default_currency: Optional[str] = Field(default=None, min_length=1)
    metadata: Optional[Dict[str, str]] = None


class RejectAccountDTO(BaseModel):
    reason: Literal["fraud", "terms_of_service", "other"]


class ListAccountsDTO(ListParams):
    created: Optional[RangeFilter] = None


# External wallets


class ExternalWallet(ApiObject):
    id: str
    object: Literal["wallet"] = "wallet"
    account: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_holder_type: Optional[Literal["individual", "company"]] = None
    country: Optional[str] = None
    currency: str
    default_for_currency: Optional[bool] = None
    last4: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None
    network: Optional[str] = None
    status: Optional[str] = None
    wallet_address: str


class CreateExternalWalletDTO(BaseModel):
    wallet_address: str = Field(min_length=1)
    network: Optional[str] = Field(default=None, min_length=1)
    currency: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_holder_type: Optional[Literal["individual", "company"]] = None
    default_for_currency: Optional[bool] = None
    metadata: Optional[Dict[str, str]] = None


class UpdateExternalWalletDTO(BaseModel):
    account_holder_name: Optional[str] = None
    account_holder_type: Optional[Literal["individual", "company"]] = None
    default_for_currency: Optional[bool] = None
    metadata: Optional[Dict[str, str]] = None


class ListExternalWalletsDTO(ListParams):
    pass


# Persons


class Person(ApiObject):
    id: str
    object: Literal["person"] = "person"
    account: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    created: Optional[int] = None
    metadata: Dict[str, str] = Field(default_factory=dict)
    address: Optional[Dict[str, Any]] = None
    dob: Optional[Dict[str, Any]] = None
    relationship: Optional[Dict[str, Any]] = None


class CreatePersonDTO(BaseModel):
    """Create or describe a person; ``address``, ``dob``, ``relationship`` and
    ``verification`` are passed through as nested dicts."""

    model_config = ConfigDict(extra="allow")

    email: Optional[str] = Field(default=None, max_length=800)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = None
    ssn_last_4: Optional[str] = Field(default=None, min_length=4, max_length=4)
    id_number: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None


class UpdatePersonDTO(CreatePersonDTO):
    pass


class PersonRelationshipFilter(BaseModel):
    authorizer: Optional[bool] = None
    director: Optional[bool] = None
    executive: Optional[bool] = None
    legal_guardian: Optional[bool] = None
    owner: Optional[bool] = None
    representative: Optional[bool] = None


class ListPersonsDTO(ListParams):
    relationship: Optional[PersonRelationshipFilter] = None


# Links


class LoginLink(ApiObject):
    object: Literal["login_link"] = "login_link"
    created: int
    url: str


class AccountLink(ApiObject):
    object: Literal["account_link"] = "account_link"
    created: int
    expires_at: int
    url: str


class CreateAccountLinkDTO(BaseModel):
    account: str = Field(min_length=1)
    type: Literal["account_onboarding", "account_update"]
    refresh_url: str
    return_url: str
