"""Tests for iamusers.types serialization."""

import json

from iamusers.enums import Effect, Role
from iamusers.types import AccessKey, PolicyCondition, PolicyDocument, PolicyStatement, UserSpec


class TestPolicyStatement:
    """Test PolicyStatement.to_dict."""

    def test_sorted_actions_and_resources(self) -> None:
        statement = PolicyStatement(
            effect=Effect.ALLOW,
            actions=frozenset({"s3:List*", "ec2:Describe*"}),
            resources=frozenset({"b", "a"}),
        )
        assert statement.to_dict() == {
            "Effect": "Allow",
            "Action": ["ec2:Describe*", "s3:List*"],
            "Resource": ["a", "b"],
        }

    def test_sid_and_condition(self) -> None:
        statement = PolicyStatement(
            effect=Effect.DENY,
            actions=frozenset({"ec2:RunInstances"}),
            resources=frozenset({"*"}),
            condition=PolicyCondition("StringNotEquals", "aws:RequestedRegion", ("us-east-1",)),
            sid="DenyOtherRegions",
        )
        data = statement.to_dict()
        assert list(data.keys()) == ["Sid", "Effect", "Action", "Resource", "Condition"]
        assert data["Condition"] == {"StringNotEquals": {"aws:RequestedRegion": ["us-east-1"]}}


class TestPolicyDocument:
    """Test PolicyDocument serialization."""

    def test_to_json_compact(self) -> None:
        document = PolicyDocument(
            name="empty",
            statements=(),
        )
        assert document.to_json(indent=None) == '{"Version": "2012-10-17", "Statement": []}'

    def test_statement_order_preserved(self) -> None:
        first = PolicyStatement(Effect.DENY, frozenset({"a:B"}), frozenset({"*"}))
        second = PolicyStatement(Effect.ALLOW, frozenset({"c:D"}), frozenset({"*"}))
        data = json.loads(PolicyDocument("ordered", (first, second)).to_json())
        assert [s["Effect"] for s in data["Statement"]] == ["Deny", "Allow"]


class TestUserSpec:
    """Test UserSpec defaults and derived role."""

    def test_defaults(self) -> None:
        spec = UserSpec(name="alice")
        assert spec.path == "/"
        assert spec.force_destroy is False
        assert spec.role == Role.NONE

    def test_role(self) -> None:
        assert UserSpec(name="a", is_dev=True, is_qa=True).role == Role.DEV
        assert UserSpec(name="b", is_qa=True).role == Role.QA


class TestAccessKey:
    """Test AccessKey representation."""

    def test_secret_not_in_repr(self) -> None:
        key = AccessKey(access_key_id="AKIAFAKE", secret_access_key="FAKE_SECRET")
        assert "FAKE_SECRET" not in repr(key)
        assert key.status == "Active"
