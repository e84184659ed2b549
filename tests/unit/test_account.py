"""Unit tests for PiShockAccount."""

import json

import aiohttp
import pytest

from pishock_client.account import PiShockAccount
from pishock_client.core.config import ClientConfig
from pishock_client.core.errors import ShockerOfflineError, ShockerPausedError

from tests.infrastructure.mock_api import SHOCKER_INFO, MockPiShockAPI, make_account, serve


class TestPiShockAccount:

    def test_credentials(self):
        account = PiShockAccount("pishock_rs", "username", "apikey")

        assert account.app_name == "pishock_rs"
        assert account.username == "username"
        assert account.credentials.api_key == "apikey"
        assert account.client.base_url == "https://do.pishock.com/api"
        assert "apikey" not in repr(account)

    def test_from_config(self):
        config = ClientConfig(
            app_name="app",
            username="user",
            api_key="key",
            api_base_url="http://localhost:1/api",
            request_timeout=3.0,
            cooldown=0.0,
            metadata_retries=0,
        )

        account = PiShockAccount.from_config(config)

        assert account.app_name == "app"
        assert account.client.base_url == "http://localhost:1/api"
        assert account.client.timeout == 3.0
        assert account.cooldown is None
        assert account.metadata_retries == 1

    def test_get_shocker_without_verification(self):
        account = PiShockAccount("app", "user", "key", cooldown=5)

        shocker = account.get_shocker_without_verification("ABC")

        assert shocker.share_code == "ABC"
        assert shocker.cooldown == 5
        assert shocker.metadata is None


class TestGetShocker:

    @pytest.mark.asyncio
    async def test_online_shocker(self, mock_api: MockPiShockAPI):
        async with serve(mock_api) as base_url:
            async with make_account(base_url) as account:
                shocker = await account.get_shocker("17519CD8GAP")

        assert shocker.name == "test 1"
        assert shocker.share_code == "17519CD8GAP"

    @pytest.mark.asyncio
    async def test_offline_shocker_is_refused(self, mock_api: MockPiShockAPI):
        mock_api.info_body = json.dumps({**SHOCKER_INFO, "online": False})

        async with serve(mock_api) as base_url:
            async with make_account(base_url) as account:
                with pytest.raises(ShockerOfflineError):
                    await account.get_shocker("ABC")

    @pytest.mark.asyncio
    async def test_paused_shocker_is_returned(self, mock_api: MockPiShockAPI):
        mock_api.info_body = json.dumps({**SHOCKER_INFO, "paused": True})

        async with serve(mock_api) as base_url:
            async with make_account(base_url) as account:
                shocker = await account.get_shocker("ABC")
                assert shocker.paused is True

                with pytest.raises(ShockerPausedError):
                    await shocker.vibrate(10, 1.0)

        assert mock_api.operate_requests() == []

    @pytest.mark.asyncio
    async def test_shared_session(self, mock_api: MockPiShockAPI):
        async with serve(mock_api) as base_url:
            async with aiohttp.ClientSession() as session:
                async with make_account(base_url, session=session) as account:
                    first = await account.get_shocker("A")
                    second = await account.get_shocker("B")
                    await first.beep(1.0)
                    await second.beep(1.0)

                assert not session.closed

        codes = [r.body["Code"] for r in mock_api.requests]
        assert codes == ["A", "B", "A", "B"]

    @pytest.mark.asyncio
    async def test_close_releases_session(self, mock_api: MockPiShockAPI):
        async with serve(mock_api) as base_url:
            account = make_account(base_url)
            await account.get_shocker("ABC")
            await account.close()

        assert account.client.closed
