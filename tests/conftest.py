"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from graph_fakes import make_devices_page, make_users_page


@pytest.fixture
def graph_client():
    """Graph client mock with one page of no devices and no users."""
    client = MagicMock()
    managed_devices = client.device_management.managed_devices
    managed_devices.get = AsyncMock(return_value=make_devices_page())
    managed_devices.with_url.return_value.get = AsyncMock(return_value=make_devices_page())
    managed_devices.by_managed_device_id.return_value.users.get = AsyncMock(
        return_value=make_users_page()
    )
    client.request_adapter.send_no_response_content_async = AsyncMock(return_value=None)
    return client
