"""PiShock account credentials and shocker lookup."""

from __future__ import annotations

from typing import Optional

import aiohttp

from pishock_client.api.client import DEFAULT_TIMEOUT, PiShockAPIClient
from pishock_client.api.payloads import Credentials
from pishock_client.core.config import PUBLIC_API_BASE_URL, ClientConfig
from pishock_client.core.errors import PiShockConnectionError, ShockerOfflineError
from pishock_client.core.logging_utils import get_module_logger
from pishock_client.core.retry_policy import RetryPolicy
from pishock_client.shocker import PiShocker

logger = get_module_logger("Account")


class PiShockAccount:
    """
    A set of PiShock API credentials.

    Use it to obtain ``PiShocker`` instances. All shockers from one account
    share its HTTP session, which is closed when the account is used as an
    async context manager or ``close()`` is awaited::

        async with PiShockAccount("my_app", "username", "apikey") as account:
            shocker = await account.get_shocker("sharecode")
            await shocker.vibrate(50, 2)
    """

    def __init__(
        self,
        app_name: str,
        username: str,
        api_key: str,
        *,
        base_url: str = PUBLIC_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        cooldown: Optional[float] = None,
        metadata_retries: int = 3,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.credentials = Credentials(username=username, api_key=api_key, app_name=app_name)
        self.cooldown = cooldown
        self.metadata_retries = max(1, metadata_retries)
        self.client = PiShockAPIClient(base_url=base_url, timeout=timeout, session=session)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "PiShockAccount":
        return cls(
            config.app_name,
            config.username,
            config.api_key,
            base_url=config.api_base_url,
            timeout=config.request_timeout,
            cooldown=config.cooldown or None,
            metadata_retries=config.metadata_retries,
            session=session,
        )

    def __repr__(self) -> str:
        return (
            f"PiShockAccount(app_name={self.app_name!r}, username={self.username!r}, "
            f"base_url={self.client.base_url!r})"
        )

    async def __aenter__(self) -> "PiShockAccount":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    @property
    def app_name(self) -> str:
        return self.credentials.app_name

    @property
    def username(self) -> str:
        return self.credentials.username

    async def get_shocker(self, share_code: str) -> PiShocker:
        """Return a shocker for ``share_code`` with its metadata loaded.

        Paused shockers are returned; commands to them fail with
        ``ShockerPausedError`` until they are resumed.

        Raises:
            ShockerOfflineError: The shocker is not connected.
            ShareCodeNotFoundError: The share code is unknown to the API.
            PiShockConnectionError: The API could not be reached.
        """
        shocker = self.get_shocker_without_verification(share_code)
        await shocker.refresh_metadata()

        if shocker.online is False:
            raise ShockerOfflineError()

        logger.info("Connected to shocker '%s' (%s)", shocker.name, share_code)
        return shocker

    def get_shocker_without_verification(self, share_code: str) -> PiShocker:
        """Return a shocker for ``share_code`` without contacting the API."""
        return PiShocker(
            share_code,
            self.credentials,
            self.client,
            cooldown=self.cooldown,
            metadata_retry=RetryPolicy(
                max_attempts=self.metadata_retries,
                retry_on=(PiShockConnectionError,),
            ),
        )
