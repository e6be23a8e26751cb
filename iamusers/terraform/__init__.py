"""
Terraform Generation Module

This module contains all Terraform generation functionality for iamusers.
It provides clean separation between policy selection logic and infrastructure
code generation.

Modules:
- models: HCL block rendering
- generate_users: Generates provider, managed policy and per-user Terraform files
"""

from .generate_users import generate_users_terraform
from .utils import make_safe_variable_name

__all__ = [
    "generate_users_terraform",
    "make_safe_variable_name",
]
