from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEV_MASTER = "dev-master"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class LaravelOptions(_CamelModel):
    starter_kit: Literal["none", "breeze", "jetstream"] = "none"
    stack: Optional[str] = None
    stack_options: List[str] = Field(default_factory=list)
    database: Literal["sqlite", "mysql", "mariadb", "pgsql", "sqlsrv"] = "sqlite"
    migrate: bool = True
    dev_environment: Optional[Literal["herd", "none", "valet", "sail"]] = None
    dev_environment_options: Dict[str, str] = Field(default_factory=dict)
    test_framework: Literal["pest", "phpunit"] = "pest"


class Preset(_CamelModel):
    """A named bundle of scaffolding choices, stored as ``<name>.json``."""

    name: str = Field(min_length=1, pattern=r"^[^/\\]+$")
    laravel_version: Optional[str] = None
    laravel_options: LaravelOptions = Field(default_factory=LaravelOptions)

    @field_validator("laravel_version", mode="before")
    @classmethod
    def _version_as_string(cls, value):
        # "laravelVersion": 11 is as common in hand-written files as "11"
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def from_json(cls, raw: str) -> "Preset":
        return cls.model_validate_json(raw)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=4)
