"""
Terraform Rendering Models

Small value objects that render HCL blocks. Block bodies are lists of
TerraformElement so comments can be interleaved with parameters.
"""

import json
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union


@dataclass(frozen=True)
class TerraformExpression:
    """Raw HCL expression rendered without quoting (e.g., a resource reference)."""
    expression: str

    def __str__(self) -> str:
        return self.expression


TerraformValue = Union[bool, int, str, TerraformExpression, Sequence[Union[str, TerraformExpression]]]


def render_value(value: TerraformValue) -> str:
    """
    Render a Python value as an HCL literal.

    Args:
        value: bool, int, str, TerraformExpression, or a list of strings/expressions

    Returns:
        HCL representation of the value
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, TerraformExpression):
        return value.expression
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value)
    items = ", ".join(render_value(item) for item in value)
    return f"[{items}]"


@dataclass
class TerraformParameter:
    name: str
    value: TerraformValue

    def render(self, indent: str = "  ") -> str:
        return f"{indent}{self.name} = {render_value(self.value)}"


@dataclass
class TerraformComment:
    text: str

    def render(self, indent: str = "  ") -> str:
        if not self.text:
            return ""
        return f"{indent}# {self.text}"


TerraformElement = Union[TerraformParameter, TerraformComment]


@dataclass
class TerraformBlock:
    """
    Top-level HCL block such as a resource, output or provider.

    Attributes:
        block_type: Block keyword (e.g., "resource", "output", "provider")
        labels: Block labels (e.g., ["aws_iam_user", "alice"])
        parameters: Body elements in render order
        comment: Optional comment rendered above the block
    """
    block_type: str
    labels: List[str]
    parameters: List[TerraformElement] = field(default_factory=list)
    comment: Optional[str] = None

    def render(self) -> str:
        lines: List[str] = []
        if self.comment:
            lines.append(f"# {self.comment}")
        header = " ".join([self.block_type] + [json.dumps(label) for label in self.labels])
        lines.append(f"{header} {{")
        lines.extend(parameter.render() for parameter in self.parameters)
        lines.append("}")
        return "\n".join(lines) + "\n"


def render_blocks(blocks: Sequence[TerraformBlock]) -> str:
    """Render blocks separated by blank lines."""
    return "\n".join(block.render() for block in blocks)
