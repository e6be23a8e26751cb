"""
Enumerations for iamusers.

This module contains all enum types used throughout the application
to replace magic strings and improve type safety.
"""

from enum import Enum


class Effect(str, Enum):
    """Effect of an IAM policy statement."""
    ALLOW = "Allow"
    DENY = "Deny"


class Role(str, Enum):
    """Role a user is provisioned for."""
    DEV = "dev"
    QA = "qa"
    NONE = "none"

    @classmethod
    def from_flags(cls, is_dev: bool, is_qa: bool) -> "Role":
        """
        Convert the legacy devuser/qauser flags into a single role.

        The dev flag wins when both are set.

        Args:
            is_dev: Legacy devuser flag
            is_qa: Legacy qauser flag

        Returns:
            Role.DEV, Role.QA, or Role.NONE when neither flag is set
        """
        if is_dev:
            return cls.DEV
        if is_qa:
            return cls.QA
        return cls.NONE
