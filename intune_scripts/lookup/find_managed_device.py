"""
Intune managed device lookup by machine name using Microsoft Graph SDK
"""

from kiota_abstractions.base_request_configuration import RequestConfiguration
from msgraph.generated.device_management.managed_devices.managed_devices_request_builder import (
    ManagedDevicesRequestBuilder,
)

from intune_scripts.errors import AmbiguousDeviceMatch, DeviceNotFound


def build_name_filter(machine_name: str) -> str:
    """OData filter for an exact device name; single quotes are doubled"""
    escaped = machine_name.replace("'", "''")
    return f"deviceName eq '{escaped}'"


def names_match(device_name, machine_name: str) -> bool:
    """Exact name comparison, ignoring case"""
    # Windows machine names are case-insensitive
    if not device_name:
        return False
    return device_name.casefold() == machine_name.casefold()


async def find_managed_device_async(graph_client, machine_name: str, allow_first_match: bool = False):
    """
    Resolve a machine name to a single Intune managed device

    Args:
        graph_client: Microsoft Graph client instance
        machine_name: Device name as shown in Intune
        allow_first_match: Take the first device when several share the name
            instead of failing

    Returns:
        The matching ManagedDevice
    """

    print(f"   Searching for managed device '{machine_name}'...")

    query_params = ManagedDevicesRequestBuilder.ManagedDevicesRequestBuilderGetQueryParameters(
        filter=build_name_filter(machine_name),
        select=["id", "deviceName"],
    )
    request_configuration = RequestConfiguration(query_parameters=query_params)

    managed_devices = graph_client.device_management.managed_devices
    response = await managed_devices.get(request_configuration=request_configuration)

    matches = []
    while response:
        for device in response.value or []:
            if names_match(device.device_name, machine_name):
                matches.append(device)
        if not response.odata_next_link:
            break
        response = await managed_devices.with_url(response.odata_next_link).get()

    if not matches:
        print(f"   No managed device found with name '{machine_name}'")
        raise DeviceNotFound(machine_name)

    if len(matches) > 1:
        device_ids = [device.id for device in matches]
        if not allow_first_match:
            print(f"   Found {len(matches)} managed devices with name '{machine_name}'")
            raise AmbiguousDeviceMatch(machine_name, device_ids)
        print(f"   WARNING: {len(matches)} managed devices share this name, using the first")
        print(f"   Ignored device IDs: {', '.join(device_ids[1:])}")

    device = matches[0]
    print(f"   Found managed device: {device.device_name}")
    print(f"   Device ID: {device.id}")
    return device
