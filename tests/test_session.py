"""Unit tests for the Graph session lifecycle."""

from unittest.mock import MagicMock, patch

import pytest
from azure.core.exceptions import ClientAuthenticationError

from intune_scripts.errors import AuthenticationFailed
from intune_scripts.session import graph_session

SCOPES = ["https://graph.microsoft.com/DeviceManagementManagedDevices.ReadWrite.All"]


@pytest.mark.asyncio
async def test_session_yields_client_and_closes_credential():
    credential = MagicMock()

    with patch("intune_scripts.session.GraphServiceClient") as client_class:
        async with graph_session(credential, SCOPES) as graph_client:
            assert graph_client is client_class.return_value
            credential.close.assert_not_called()

    credential.get_token.assert_called_once_with(*SCOPES)
    client_class.assert_called_once_with(credentials=credential, scopes=SCOPES)
    credential.close.assert_called_once()


@pytest.mark.asyncio
async def test_session_closes_credential_when_block_fails():
    credential = MagicMock()

    with patch("intune_scripts.session.GraphServiceClient"):
        with pytest.raises(RuntimeError):
            async with graph_session(credential, SCOPES):
                raise RuntimeError("lookup failed")

    credential.close.assert_called_once()


@pytest.mark.asyncio
async def test_session_authentication_failure_builds_no_client():
    """Test a failed sign-in aborts before the Graph client exists."""
    credential = MagicMock()
    credential.get_token.side_effect = ClientAuthenticationError("AADSTS50126: invalid credentials")

    with patch("intune_scripts.session.GraphServiceClient") as client_class:
        with pytest.raises(AuthenticationFailed) as exc_info:
            async with graph_session(credential, SCOPES):
                pytest.fail("session body must not run")

    assert "AADSTS50126" in str(exc_info.value)
    client_class.assert_not_called()
    credential.close.assert_called_once()
