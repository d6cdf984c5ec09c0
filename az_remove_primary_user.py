#!/usr/bin/env python3
"""
Intune Primary User Removal Script

Removes the primary user association from a single Intune managed device:
- Signs in to Microsoft Graph with DeviceManagementManagedDevices.ReadWrite.All
- Finds the managed device by its machine name
- Looks up the users associated with the device
- Deletes the primary user reference when one exists

Run this during device cleanup or before handing a device to a new user.
CAUTION: The removal asks for confirmation unless --yes is given.
"""

import sys, os, yaml, asyncio
import argparse
import logging
import traceback
from intune_scripts import prerequisites
from intune_scripts.errors import ConfigurationError, PrerequisiteMissing, PrimaryUserRemovalError

DEFAULT_CONFIG_FILE = "az_primary_user_config.yaml"

# Environment variables read when the config file and command line are silent
ENV_FALLBACKS = {
    "TENANT_ID": "AZURE_TENANT_ID",
    "CLIENT_ID": "AZURE_CLIENT_ID",
    "CLIENT_SECRET": "AZURE_CLIENT_SECRET",
}

SECRET_KEYS = ("CLIENT_SECRET",)


def print_status(message, level="info"):
    """Simple console output with different levels"""
    if level == "header":
        print(f"\n{message}")
        print("=" * len(message))
    elif level == "section":
        print(f"\n{message}")
    else:
        print(message)


class UsageErrorParser(argparse.ArgumentParser):
    """Argument parser whose usage errors exit 1; exit 2 is reserved for a failed removal"""

    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        print_status("Run finished", "section")
        sys.exit(1)


def parse_args(argv=None):
    """Parse the command line; the machine name must not be blank"""
    parser = UsageErrorParser(
        description="Remove the primary user from an Intune managed device"
    )
    parser.add_argument("machine_name", help="Device name as shown in Intune")
    parser.add_argument(
        "--config",
        help=f"YAML configuration file (default: {DEFAULT_CONFIG_FILE} when present)",
    )
    parser.add_argument(
        "--auth-method",
        choices=["interactive", "device_code", "client_secret"],
        help="How to sign in to Microsoft Graph (default: interactive)",
    )
    parser.add_argument("--tenant-id", help="Azure AD tenant ID")
    parser.add_argument("--client-id", help="Azure AD application (client) ID")
    parser.add_argument(
        "--allow-first-match",
        action="store_true",
        help="Use the first device when several share the machine name",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be removed without removing it",
    )
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument("--verbose", action="store_true", help="Enable Azure SDK debug logging")

    args = parser.parse_args(argv)
    if not args.machine_name.strip():
        parser.error("machine_name must not be empty")
    args.machine_name = args.machine_name.strip()
    return args


def load_config(config_file_path: str) -> dict:
    """Load configuration from YAML file"""

    if not os.path.exists(config_file_path):
        raise ConfigurationError(f"Configuration file not found: {config_file_path}")

    with open(config_file_path, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {config_file_path}")

    return config


def build_settings(args, environ=None) -> dict:
    """
    Merge settings with precedence: command line, config file, environment, defaults
    """

    environ = os.environ if environ is None else environ

    if args.config:
        config = load_config(args.config)
    elif os.path.exists(DEFAULT_CONFIG_FILE):
        config = load_config(DEFAULT_CONFIG_FILE)
    else:
        config = {}

    settings = {
        "AUTH_METHOD": "interactive",
        "TENANT_ID": None,
        "CLIENT_ID": None,
        "CLIENT_SECRET": None,
        "ALLOW_FIRST_MATCH": False,
    }
    for key, env_name in ENV_FALLBACKS.items():
        if environ.get(env_name):
            settings[key] = environ[env_name]
    for key, value in config.items():
        if value is not None:
            settings[key.upper()] = value

    if args.auth_method:
        settings["AUTH_METHOD"] = args.auth_method
    if args.tenant_id:
        settings["TENANT_ID"] = args.tenant_id
    if args.client_id:
        settings["CLIENT_ID"] = args.client_id
    if args.allow_first_match:
        settings["ALLOW_FIRST_MATCH"] = True

    if not isinstance(settings["ALLOW_FIRST_MATCH"], bool):
        raise ConfigurationError(
            f"ALLOW_FIRST_MATCH must be true or false, got {settings['ALLOW_FIRST_MATCH']!r}"
        )

    return settings


def configure_logging(verbose: bool):
    """Send Azure SDK logs to stderr, DEBUG with --verbose and WARNING otherwise"""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    for logger_name in ("azure", "msgraph", "kiota_http"):
        logging.getLogger(logger_name).setLevel(level)


def check_prerequisites():
    """Fail before any sign-in when the Graph or identity libraries are missing"""
    missing = prerequisites.find_missing_modules()
    if missing:
        raise PrerequisiteMissing(
            f"Required modules not installed: {', '.join(missing)} "
            "(install with: pip install msgraph-sdk azure-identity)"
        )


def confirm_removal(machine_name: str) -> bool:
    """Ask the operator to confirm; no answer (closed stdin) counts as no"""
    try:
        response = input(f"Remove the primary user from '{machine_name}'? (yes/no): ")
    except EOFError:
        print_status("\nNo confirmation received - use --yes for unattended runs")
        return False
    return response.lower() in ["yes", "y"]


async def async_main(args, settings: dict) -> int:
    """Main async removal function, returns the process exit code"""

    # Graph-dependent modules are imported only after the prerequisite check
    from intune_scripts import az_login, session
    from intune_scripts.lookup import find_managed_device, get_primary_users
    from intune_scripts.destroy import remove_primary_user

    try:
        print_status("Azure Authentication", "section")
        credential = az_login.azure_login(settings)
        scopes = az_login.get_scopes(settings["AUTH_METHOD"])

        async with session.graph_session(credential, scopes) as graph_client:
            print_status("Finding Managed Device", "section")
            device = await find_managed_device.find_managed_device_async(
                graph_client=graph_client,
                machine_name=args.machine_name,
                allow_first_match=settings.get("ALLOW_FIRST_MATCH", False),
            )
            print_status(f"Found Managed Device - ID: {device.id}")

            print_status("Primary User Lookup", "section")
            users = await get_primary_users.get_primary_users_async(
                graph_client=graph_client, device_id=device.id
            )
            if not users:
                print_status("Nothing to remove - device has no primary user")
                return 0
            if len(users) > 1:
                print_status(
                    f"Device has {len(users)} associated users - the whole relationship will be removed"
                )

            if args.dry_run:
                print_status("Dry run - primary user was not removed", "section")
                return 0

            if not args.yes:
                print_status("WARNING: This will remove the device's primary user!", "section")
                if not confirm_removal(args.machine_name):
                    print_status("Removal cancelled by user")
                    return 0

            print_status("Primary User Removal", "section")
            await remove_primary_user.remove_primary_user_async(
                graph_client=graph_client, device_id=device.id
            )
            print_status("PRIMARY USER REMOVAL COMPLETED", "header")
            print_status(f"Primary user removed from '{args.machine_name}'")
            return 0

    except PrimaryUserRemovalError as e:
        print_status(f"ERROR: {e}", "section")
        return e.exit_code

    except Exception as e:
        print_status(f"ERROR: Primary user removal failed!", "section")
        print_status(f"   Error details: {str(e)}")
        print_status(f"   Error type: {type(e).__name__}")
        print_status(f"Full traceback:", "section")

        tb_str = traceback.format_exc()
        for line in tb_str.split("\n"):
            if line.strip():
                print_status(line)

        return 1


def main(argv=None):
    """Synchronous main function that runs the async removal"""

    args = parse_args(argv)
    configure_logging(args.verbose)

    print_status("Intune Primary User Removal Process", "header")

    try:
        check_prerequisites()

        print_status("Loading configuration...", "section")
        settings = build_settings(args)
        print_status("Configuration loaded successfully")
        for key, value in settings.items():
            if key in SECRET_KEYS and value:
                value = "********"
            print_status(f"{key}: {value if value is not None else 'Not configured'}")
    except PrimaryUserRemovalError as e:
        print_status(f"ERROR: {e}", "section")
        print_status("Run finished", "section")
        sys.exit(e.exit_code)

    exit_code = asyncio.run(async_main(args, settings))
    print_status("Run finished", "section")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
