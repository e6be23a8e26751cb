from typing import List, Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator

from .constants import DEFAULT_REGION
from .enums import Role
from .types import UserSpec


# Centralized defaults for directories
DEFAULT_OUTPUT_DIR = "build/iam"


class UserConfig(BaseModel):
    name: str = Field(min_length=1)
    path: str = "/"
    force_destroy: bool = False
    # Legacy flag names are accepted alongside the attribute names
    is_dev: bool = Field(default=False, validation_alias=AliasChoices("devuser", "is_dev"))
    is_qa: bool = Field(default=False, validation_alias=AliasChoices("qauser", "is_qa"))

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        if not (value.startswith("/") and value.endswith("/")):
            raise ValueError(f"IAM path must begin and end with '/': {value!r}")
        return value

    def to_user_spec(self) -> UserSpec:
        return UserSpec(
            name=self.name,
            path=self.path,
            force_destroy=self.force_destroy,
            is_dev=self.is_dev,
            is_qa=self.is_qa,
        )


class IamUsersConfig(BaseModel):
    region: str = DEFAULT_REGION
    # Base directory where Terraform files and policy JSON are generated
    output_dir: str = DEFAULT_OUTPUT_DIR
    # Role for users with neither devuser nor qauser set; None rejects them
    fallback_role: Optional[Role] = Role.QA
    # Role to assume before calling IAM for --apply/--destroy
    provisioning_role_arn: Optional[str] = None
    # JSON file that receives generated access keys on --apply
    credentials_file: Optional[str] = None
    users: List[UserConfig] = []

    @field_validator("users")
    @classmethod
    def _check_unique_names(cls, users: List[UserConfig]) -> List[UserConfig]:
        names = [user.name for user in users]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate user names: {', '.join(duplicates)}")
        return users

    def user_specs(self) -> List[UserSpec]:
        return [user.to_user_spec() for user in self.users]
