"""Live checks against do.pishock.com.

Skipped unless ``--run-live`` is given. Needs PISHOCK_USERNAME, PISHOCK_APIKEY
and PISHOCK_SHARECODE for a shocker the account may control; only beeps are
sent.
"""

import os

import pytest

from pishock_client import ClientConfig, PiShockAccount, ShareCodeNotFoundError

pytestmark = pytest.mark.live


@pytest.fixture
def live_config() -> ClientConfig:
    config = ClientConfig().with_env()
    if not (config.has_credentials and config.share_code):
        pytest.skip("PISHOCK_USERNAME, PISHOCK_APIKEY and PISHOCK_SHARECODE are required")
    return config.with_overrides(app_name=os.environ.get("PISHOCK_APP_NAME", "pishock_client tests"))


@pytest.mark.asyncio
async def test_shocker_metadata(live_config):
    async with PiShockAccount.from_config(live_config) as account:
        shocker = await account.get_shocker(live_config.share_code)

    assert shocker.name
    assert 1 <= shocker.max_intensity <= 100
    assert 1 <= shocker.max_duration <= 15


@pytest.mark.asyncio
async def test_beep(live_config):
    async with PiShockAccount.from_config(live_config) as account:
        shocker = await account.get_shocker(live_config.share_code)
        await shocker.beep(0.3)


@pytest.mark.asyncio
async def test_unknown_share_code(live_config):
    async with PiShockAccount.from_config(live_config) as account:
        with pytest.raises(ShareCodeNotFoundError):
            await account.get_shocker("0000000000000")
