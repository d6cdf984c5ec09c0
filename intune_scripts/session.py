"""
Authenticated Microsoft Graph session scoped to a single run
"""

from contextlib import asynccontextmanager

from azure.core.exceptions import ClientAuthenticationError
from msgraph import GraphServiceClient

from intune_scripts.errors import AuthenticationFailed


@asynccontextmanager
async def graph_session(credential, scopes: list):
    """
    Acquire a token for `scopes`, yield a Graph client bound to `credential`
    and close the credential when the block exits, on every path.

    Token acquisition happens up front so a failed sign-in aborts before any
    Graph request is built.
    """

    try:
        print("   Requesting access token...")
        try:
            credential.get_token(*scopes)
        except ClientAuthenticationError as e:
            print(f"   Authentication failed: {str(e)}")
            raise AuthenticationFailed(f"Authentication failed: {e.message}") from e
        print("   Access token acquired")

        graph_client = GraphServiceClient(credentials=credential, scopes=scopes)
        print("   Graph client initialized successfully")

        yield graph_client
    finally:
        credential.close()
        print("   Session closed")
