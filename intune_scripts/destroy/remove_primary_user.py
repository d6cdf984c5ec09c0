"""
Intune primary user removal using the Microsoft Graph beta endpoint
"""

from kiota_abstractions.method import Method
from kiota_abstractions.request_information import RequestInformation
from msgraph.generated.models.o_data_errors.o_data_error import ODataError

from intune_scripts.errors import RemovalFailed

GRAPH_BETA_ENDPOINT = "https://graph.microsoft.com/beta"


def primary_user_ref_url(device_id: str) -> str:
    """Beta users/$ref URL for the device's primary user relationship"""
    return f"{GRAPH_BETA_ENDPOINT}/deviceManagement/managedDevices/{device_id}/users/$ref"


def describe_graph_error(error: Exception) -> str:
    """Graph error code and message when available, otherwise the exception text"""
    if isinstance(error, ODataError) and error.error:
        code = error.error.code or "UnknownError"
        return f"{code}: {error.error.message}"
    return str(error)


async def remove_primary_user_async(graph_client, device_id: str):
    """
    Remove the primary user relationship from a managed device.

    The users/$ref reference is only exposed on the beta endpoint, so the
    request goes through the client's request adapter with an absolute URL.
    The relationship is removed as a whole; the device record is untouched.
    """

    try:
        print(f"   Removing primary user from device '{device_id}'...")

        request_info = RequestInformation()
        request_info.http_method = Method.DELETE
        request_info.url = primary_user_ref_url(device_id)

        error_mapping = {"XXX": ODataError}
        await graph_client.request_adapter.send_no_response_content_async(request_info, error_mapping)

        print("   Primary user removed successfully")
        print(f"   Device ID: {device_id}")

    except Exception as e:
        reason = describe_graph_error(e)
        print(f"   Failed to remove primary user: {reason}")
        print(f"   Error type: {type(e).__name__}")
        raise RemovalFailed(device_id, reason) from e
