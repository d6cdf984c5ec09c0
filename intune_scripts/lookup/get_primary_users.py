"""
Primary user lookup for an Intune managed device using Microsoft Graph SDK
"""


async def get_primary_users_async(graph_client, device_id: str) -> list:
    """
    Return the users associated with the managed device, possibly empty
    """

    print(f"   Looking up users associated with device '{device_id}'...")
    response = await graph_client.device_management.managed_devices.by_managed_device_id(device_id).users.get()

    users = list(response.value or []) if response else []
    if not users:
        print("   No primary user associated with this device")
        return users

    for user in users:
        print(f"   Primary user: {user.display_name} ({user.user_principal_name or user.id})")
    return users
