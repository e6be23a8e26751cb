"""
Utility functions used across the iamusers codebase.
"""

import hashlib


def make_safe_variable_name(name: str) -> str:
    """
    Convert a name to a safe Terraform identifier.

    Replaces spaces and special characters with underscores, ensures the name
    starts with a letter, and removes consecutive underscores. A name with no
    letters or digits (IAM allows e.g. "@@") becomes "user_" plus a short hash
    of the original name.

    Args:
        name: Original name (e.g., "alice.smith@example")

    Returns:
        Safe identifier (e.g., "alice_smith_example")
    """
    safe_name = name.lower().replace(" ", "_").replace("-", "_")
    safe_name = "".join(c if c.isalnum() or c == "_" else "_" for c in safe_name)
    while "__" in safe_name:
        safe_name = safe_name.replace("__", "_")
    safe_name = safe_name.strip("_")
    if not safe_name:
        return "user_" + hashlib.sha256(name.encode("utf-8")).hexdigest()[:8]
    if not safe_name[0].isalpha():
        safe_name = "user_" + safe_name
    return safe_name
