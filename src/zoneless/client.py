from __future__ import annotations

from typing import Optional, Type
from types import TracebackType

import httpx

from .crypto.webhooks import Clock, Webhooks
from .env import DEFAULT_TIMEOUT, DEFAULT_WEBHOOK_TOLERANCE, Settings, get_settings
from .infrastructure.http.http_client import HttpClient
from .infrastructure.resources.accounts import AccountLinks, Accounts
from .infrastructure.resources.balances import BalanceResource, BalanceTransactions
from .infrastructure.resources.events import Events, WebhookEndpoints
from .infrastructure.resources.money_movement import TopUps, Transfers
from .infrastructure.resources.payouts import Payouts


class Zoneless:
    """Synchronous client for the Zoneless API.

    Example::

        with Zoneless("sk_live_z_...", "https://api.example.com") as zoneless:
            rounds = zoneless.payouts.process_all(os.environ["SOLANA_SECRET_KEY"])
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Optional[Clock] = None,
        webhook_secret: Optional[str] = None,
        webhook_tolerance: int = DEFAULT_WEBHOOK_TOLERANCE,
    ) -> None:
        if not api_key:
            raise ValueError("Zoneless API key is required")
        if not base_url:
            raise ValueError("Zoneless API base URL is required")

        self._http = HttpClient(api_key, base_url, timeout=timeout, transport=transport)

        self.accounts = Accounts(self._http)
        self.account_links = AccountLinks(self._http)
        self.balance = BalanceResource(self._http)
        self.balance_transactions = BalanceTransactions(self._http)
        self.events = Events(self._http)
        self.login_links = self.accounts.login_links
        self.payouts = Payouts(self._http)
        self.topups = TopUps(self._http)
        self.transfers = Transfers(self._http)
        self.webhook_endpoints = WebhookEndpoints(self._http)
        self.webhooks = Webhooks(
            clock=clock, secret=webhook_secret, tolerance=webhook_tolerance
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "Zoneless":
        kwargs.setdefault("webhook_secret", settings.webhook_secret)
        kwargs.setdefault("webhook_tolerance", settings.webhook_tolerance)
        return cls(settings.api_key, settings.base_url, settings.timeout, **kwargs)

    @classmethod
    def from_env(cls, **kwargs) -> "Zoneless":
        """Build a client from ``ZONELESS_*`` environment variables."""
        return cls.from_settings(get_settings(), **kwargs)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "Zoneless":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()
