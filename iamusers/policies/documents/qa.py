"""QA policy: read-only access across a fixed set of service namespaces."""

from ...constants import ALL_RESOURCES, QA_POLICY_NAME, QA_READ_ONLY_NAMESPACES, QA_READ_ONLY_VERBS
from ...enums import Effect, Role
from ...types import PolicyDocument, PolicyStatement
from ..registry import register_policy


def _read_only_actions() -> frozenset[str]:
    return frozenset(
        f"{namespace}:{verb}*"
        for namespace in QA_READ_ONLY_NAMESPACES
        for verb in QA_READ_ONLY_VERBS
    )


@register_policy(Role.QA)
def qa_policy_document() -> PolicyDocument:
    """Build the QA policy document: a single unconditioned Allow on all resources."""
    return PolicyDocument(
        name=QA_POLICY_NAME,
        statements=(
            PolicyStatement(
                sid="AllowReadOnly",
                effect=Effect.ALLOW,
                actions=_read_only_actions(),
                resources=frozenset({ALL_RESOURCES}),
            ),
        ),
    )
