"""Unit tests for credential selection."""

from unittest.mock import patch

import pytest

from intune_scripts import az_login
from intune_scripts.errors import ConfigurationError


def test_get_scopes():
    assert az_login.get_scopes("interactive") == [
        "https://graph.microsoft.com/DeviceManagementManagedDevices.ReadWrite.All"
    ]
    assert az_login.get_scopes("device_code") == az_login.get_scopes("interactive")
    assert az_login.get_scopes("client_secret") == ["https://graph.microsoft.com/.default"]


def test_interactive_is_default():
    with patch.object(az_login, "InteractiveBrowserCredential") as credential_class:
        credential = az_login.azure_login({"TENANT_ID": "tenant-1"})

    assert credential is credential_class.return_value
    credential_class.assert_called_once_with(tenant_id="tenant-1")


def test_device_code_credential():
    with patch.object(az_login, "DeviceCodeCredential") as credential_class:
        az_login.azure_login({"AUTH_METHOD": "device_code", "CLIENT_ID": "client-1"})

    credential_class.assert_called_once_with(client_id="client-1")


def test_client_secret_credential():
    settings = {
        "AUTH_METHOD": "client_secret",
        "TENANT_ID": "tenant-1",
        "CLIENT_ID": "client-1",
        "CLIENT_SECRET": "s3cret",
    }
    with patch.object(az_login, "ClientSecretCredential") as credential_class:
        az_login.azure_login(settings)

    credential_class.assert_called_once_with(
        tenant_id="tenant-1", client_id="client-1", client_secret="s3cret"
    )


def test_client_secret_requires_all_values():
    with pytest.raises(ConfigurationError) as exc_info:
        az_login.azure_login({"AUTH_METHOD": "client_secret", "TENANT_ID": "tenant-1"})

    assert "CLIENT_ID" in str(exc_info.value)
    assert "CLIENT_SECRET" in str(exc_info.value)


def test_unknown_auth_method():
    with pytest.raises(ConfigurationError):
        az_login.azure_login({"AUTH_METHOD": "certificate"})
