"""
Azure authentication for Intune primary user removal.

Supports interactive browser sign-in (default), device code sign-in for
operators without a local browser, and client secret sign-in for scheduled
automation jobs.
"""

from azure.identity import (
    ClientSecretCredential,
    DeviceCodeCredential,
    InteractiveBrowserCredential,
)
from azure.core.exceptions import ClientAuthenticationError

from intune_scripts.errors import ConfigurationError

AUTH_METHODS = ("interactive", "device_code", "client_secret")

DELEGATED_SCOPE = "https://graph.microsoft.com/DeviceManagementManagedDevices.ReadWrite.All"
APP_ONLY_SCOPE = "https://graph.microsoft.com/.default"


def get_scopes(auth_method: str) -> list:
    """
    App-only sign-in must request .default; delegated sign-in asks for the
    single write scope needed to change the device's users.
    """
    if auth_method == "client_secret":
        return [APP_ONLY_SCOPE]
    return [DELEGATED_SCOPE]


def azure_login(settings: dict):
    """
    Build the credential for the configured auth method.
    Returns credential for use with the Graph session.
    """

    auth_method = settings.get("AUTH_METHOD") or "interactive"
    az_tenant_id = settings.get("TENANT_ID")
    client_id = settings.get("CLIENT_ID")

    if auth_method not in AUTH_METHODS:
        raise ConfigurationError(
            f"Unknown auth method '{auth_method}', expected one of: {', '.join(AUTH_METHODS)}"
        )

    # Unset ids fall back to the azure-identity defaults
    optional_kwargs = {}
    if az_tenant_id:
        optional_kwargs["tenant_id"] = az_tenant_id
    if client_id:
        optional_kwargs["client_id"] = client_id

    try:
        if auth_method == "client_secret":
            client_secret = settings.get("CLIENT_SECRET")
            missing = [
                name
                for name, value in (
                    ("TENANT_ID", az_tenant_id),
                    ("CLIENT_ID", client_id),
                    ("CLIENT_SECRET", client_secret),
                )
                if not value
            ]
            if missing:
                raise ConfigurationError(
                    f"client_secret authentication requires: {', '.join(missing)}"
                )
            credential = ClientSecretCredential(
                tenant_id=az_tenant_id,
                client_id=client_id,
                client_secret=client_secret,
            )
            print("   Client secret credential created")
        elif auth_method == "device_code":
            credential = DeviceCodeCredential(**optional_kwargs)
            print("   Device code credential created")
        else:
            credential = InteractiveBrowserCredential(**optional_kwargs)
            print("   Interactive browser credential created")

        return credential
    except ClientAuthenticationError as e:
        print(f"   Authentication failed: {e}")
        raise
