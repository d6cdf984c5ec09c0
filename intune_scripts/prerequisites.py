"""
Local precondition check run before any credential or Graph client is created
"""

import importlib.util

REQUIRED_MODULES = ("msgraph", "azure.identity")


def find_missing_modules(modules=REQUIRED_MODULES) -> list:
    """
    Return the modules from `modules` that cannot be imported in this environment
    """

    missing = []
    for module_name in modules:
        try:
            if importlib.util.find_spec(module_name) is None:
                missing.append(module_name)
        except ModuleNotFoundError:
            # Parent package (e.g. "azure") is absent
            missing.append(module_name)
    return missing
