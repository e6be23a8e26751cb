"""
Shared data types and models for the iamusers application.

This module contains all the data classes used across the application
to avoid circular import issues and provide a single source of truth
for data structures.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from .constants import POLICY_VERSION
from .enums import Effect, Role


# Type aliases for JSON-serializable data
JsonDict = Dict[str, object]
"""Type for JSON-serializable dictionaries with runtime-typed values."""


@dataclass(frozen=True)
class PolicyCondition:
    """
    Condition block of a policy statement.

    Attributes:
        test: Condition operator (e.g., "StringEquals")
        variable: Condition key (e.g., "ec2:InstanceType")
        values: Values the key is compared against
    """
    test: str
    variable: str
    values: Tuple[str, ...]

    def to_dict(self) -> JsonDict:
        return {self.test: {self.variable: list(self.values)}}


@dataclass(frozen=True)
class PolicyStatement:
    """One rule within a policy document."""
    effect: Effect
    actions: FrozenSet[str]
    resources: FrozenSet[str]
    condition: Optional[PolicyCondition] = None
    sid: Optional[str] = None

    def to_dict(self) -> JsonDict:
        """
        Serialize the statement to the AWS policy grammar.

        Actions and resources are sorted so output is deterministic.

        Returns:
            Statement dictionary with Effect/Action/Resource and optional Sid/Condition
        """
        statement: JsonDict = {}
        if self.sid:
            statement["Sid"] = self.sid
        statement["Effect"] = self.effect.value
        statement["Action"] = sorted(self.actions)
        statement["Resource"] = sorted(self.resources)
        if self.condition is not None:
            statement["Condition"] = self.condition.to_dict()
        return statement


@dataclass(frozen=True)
class PolicyDocument:
    """
    Named, ordered sequence of policy statements.

    Attributes:
        name: Policy name used for the IAM managed policy and file names
        statements: Statements in evaluation order
        version: Policy language version
    """
    name: str
    statements: Tuple[PolicyStatement, ...]
    version: str = POLICY_VERSION

    def to_dict(self) -> JsonDict:
        return {
            "Version": self.version,
            "Statement": [statement.to_dict() for statement in self.statements],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize the document to a JSON policy document string."""
        return json.dumps(self.to_dict(), indent=indent)

    def statements_with_effect(self, effect: Effect) -> List[PolicyStatement]:
        return [statement for statement in self.statements if statement.effect == effect]


@dataclass
class UserSpec:
    """
    Desired IAM user.

    Attributes:
        name: IAM user name
        path: IAM path for the user
        force_destroy: Remove dependent resources when destroying the user
        is_dev: Legacy devuser flag
        is_qa: Legacy qauser flag
    """
    name: str
    path: str = "/"
    force_destroy: bool = False
    is_dev: bool = False
    is_qa: bool = False

    @property
    def role(self) -> Role:
        return Role.from_flags(self.is_dev, self.is_qa)


@dataclass
class AccessKey:
    """Generated long-lived credential pair bound to a user."""
    access_key_id: str
    secret_access_key: str = field(repr=False)
    status: str = "Active"


@dataclass
class ProvisionedUser:
    """Result of provisioning a single user."""
    identity: UserSpec
    attached_policy: PolicyDocument
    access_key: AccessKey
    user_arn: str
    policy_arn: str
