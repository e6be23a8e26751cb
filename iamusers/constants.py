"""
Constants module for policy names and fixed policy content.

This module contains the rule sets of the Dev and QA policy documents and
other constants used throughout the iamusers codebase.
"""

# AWS IAM policy language version
# Reference: https://docs.aws.amazon.com/IAM/latest/UserGuide/reference_policies_elements_version.html
POLICY_VERSION = "2012-10-17"

# Region the provider block and boto3 sessions are pinned to
DEFAULT_REGION = "us-east-1"

# Policy name constants
DEV_POLICY_NAME = "dev_policy"
QA_POLICY_NAME = "qa_policy"

# Dev policy
# Elastic Beanstalk environment lifecycle actions denied to developers
DEV_DENIED_ACTIONS = frozenset({
    "elasticbeanstalk:CreateEnvironment",
    "elasticbeanstalk:RebuildEnvironment",
    "elasticbeanstalk:RestartAppServer",
    "elasticbeanstalk:SwapEnvironmentCNAMEs",
    "elasticbeanstalk:TerminateEnvironment",
    "elasticbeanstalk:UpdateEnvironment",
})
DEV_ALLOWED_ACTIONS = frozenset({"ec2:RunInstances"})
DEV_ALLOWED_RESOURCES = frozenset({
    "arn:aws:ec2:*:*:instance/*",
    "arn:aws:ec2:*:*:subnet/*",
})
INSTANCE_TYPE_CONDITION_TEST = "StringEquals"
INSTANCE_TYPE_CONDITION_VARIABLE = "ec2:InstanceType"
DEV_ALLOWED_INSTANCE_TYPES = ("t2.micro", "t2.small")

# QA policy
# Service namespaces QA users get read-only access to (alphabetical)
QA_READ_ONLY_NAMESPACES = (
    "autoscaling",
    "cloudwatch",
    "ec2",
    "elasticbeanstalk",
    "elasticloadbalancing",
    "logs",
    "rds",
    "s3",
)
QA_READ_ONLY_VERBS = ("Describe", "Get", "List")

ALL_RESOURCES = "*"

# Terraform file generation constants
PROVIDER_FILENAME = "provider.tf"
POLICIES_FILENAME = "policies.tf"
USER_FILE_SUFFIX = "_user.tf"
POLICIES_SUBDIR = "policies"
