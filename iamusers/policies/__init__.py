"""
Role policy documents for iamusers.

Automatically discovers and imports all policy document modules to ensure
they register themselves via the @register_policy decorator.
"""

import importlib
import pkgutil
from pathlib import Path


def _discover_and_register_policies() -> None:
    """
    Automatically discover and import all policy document modules.

    Walks through the documents/ directory and imports all Python files.
    This triggers the @register_policy decorator, which registers each
    document factory in the registry.
    """
    documents_dir = Path(__file__).parent / "documents"

    for module_info in pkgutil.iter_modules([str(documents_dir)]):
        module_name = f"iamusers.policies.documents.{module_info.name}"
        importlib.import_module(module_name)


_discover_and_register_policies()

# Policy factories are accessed via registry, not direct imports
__all__ = []
