"""Dev policy: no Elastic Beanstalk environment lifecycle, small EC2 instances only."""

from ...constants import (
    ALL_RESOURCES,
    DEV_ALLOWED_ACTIONS,
    DEV_ALLOWED_INSTANCE_TYPES,
    DEV_ALLOWED_RESOURCES,
    DEV_DENIED_ACTIONS,
    DEV_POLICY_NAME,
    INSTANCE_TYPE_CONDITION_TEST,
    INSTANCE_TYPE_CONDITION_VARIABLE,
)
from ...enums import Effect, Role
from ...types import PolicyCondition, PolicyDocument, PolicyStatement
from ..registry import register_policy


@register_policy(Role.DEV)
def dev_policy_document() -> PolicyDocument:
    """
    Build the Dev policy document.

    Contains a Deny statement for Elastic Beanstalk environment lifecycle
    actions on all resources, followed by an Allow statement for launching
    EC2 instances restricted to the allowed instance types.

    Returns:
        Dev PolicyDocument
    """
    deny_environment_lifecycle = PolicyStatement(
        sid="DenyBeanstalkEnvironmentLifecycle",
        effect=Effect.DENY,
        actions=DEV_DENIED_ACTIONS,
        resources=frozenset({ALL_RESOURCES}),
    )
    allow_small_instances = PolicyStatement(
        sid="AllowSmallInstanceLaunch",
        effect=Effect.ALLOW,
        actions=DEV_ALLOWED_ACTIONS,
        resources=DEV_ALLOWED_RESOURCES,
        condition=PolicyCondition(
            test=INSTANCE_TYPE_CONDITION_TEST,
            variable=INSTANCE_TYPE_CONDITION_VARIABLE,
            values=DEV_ALLOWED_INSTANCE_TYPES,
        ),
    )
    return PolicyDocument(
        name=DEV_POLICY_NAME,
        statements=(deny_environment_lifecycle, allow_small_instances),
    )
