"""
Failure conditions for the primary user removal run, each mapped to a process exit code
"""


class PrimaryUserRemovalError(Exception):
    exit_code = 1


class PrerequisiteMissing(PrimaryUserRemovalError):
    pass


class ConfigurationError(PrimaryUserRemovalError):
    pass


class AuthenticationFailed(PrimaryUserRemovalError):
    pass


class DeviceNotFound(PrimaryUserRemovalError):
    def __init__(self, machine_name: str):
        super().__init__(f"No managed device found with name '{machine_name}'")
        self.machine_name = machine_name


class AmbiguousDeviceMatch(PrimaryUserRemovalError):
    def __init__(self, machine_name: str, device_ids: list):
        super().__init__(
            f"{len(device_ids)} managed devices are named '{machine_name}': {', '.join(device_ids)}"
        )
        self.machine_name = machine_name
        self.device_ids = device_ids


class RemovalFailed(PrimaryUserRemovalError):
    # Own exit code, separate from lookup and sign-in failures
    exit_code = 2

    def __init__(self, device_id: str, reason: str):
        super().__init__(f"Failed to remove primary user from device '{device_id}': {reason}")
        self.device_id = device_id
        self.reason = reason
