"""Pydantic schemas for mint configuration."""

from typing import Any, List

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from common.constants import DEFAULT_LICENSE, DEFAULT_ROYALTY_PERCENT
from common.exceptions import MintConfigValidationError


class Attribute(BaseModel):
    """A name/value trait attached to a token."""
    name: str
    value: str

    @field_validator('name')
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('attribute name is required')
        return v

    @field_validator('value')
    @classmethod
    def _strip_value(cls, v: str) -> str:
        return v.strip()


class MintConfig(BaseModel):
    """User-supplied token configuration."""
    name: str
    description: str
    royalties: int = DEFAULT_ROYALTY_PERCENT
    tags: List[str] = []
    attributes: List[Attribute] = []
    license: str = DEFAULT_LICENSE
    open_edition: bool = False
    editions: int = 1

    @field_validator('name', 'description')
    @classmethod
    def _required_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('must not be empty')
        return v

    @field_validator('royalties')
    @classmethod
    def _royalty_range(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError('royalty percentage must be between 0 and 100')
        return v

    @field_validator('tags', mode='before')
    @classmethod
    def _split_tags(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.split(',')
        if isinstance(v, (list, tuple)):
            return [tag.strip() for tag in v if isinstance(tag, str) and tag.strip()]
        return v

    @field_validator('license')
    @classmethod
    def _strip_license(cls, v: str) -> str:
        return v.strip()

    @field_validator('attributes')
    @classmethod
    def _unique_attribute_names(cls, v: List[Attribute]) -> List[Attribute]:
        names = [attr.name for attr in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"attribute names must be unique: {', '.join(duplicates)}")
        return v

    @model_validator(mode='after')
    def _edition_count(self) -> 'MintConfig':
        if not self.open_edition and self.editions <= 0:
            raise ValueError('fixed editions require a positive edition count')
        return self

    @property
    def royalty_basis_points(self) -> int:
        return self.royalties * 100


def build_mint_config(**fields) -> MintConfig:
    """
    Validate raw fields into a MintConfig.

    Raises:
        MintConfigValidationError: With one message per failing field
    """
    try:
        return MintConfig(**fields)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(loc) for loc in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        ]
        raise MintConfigValidationError(f"Invalid mint configuration: {'; '.join(errors)}", errors) from None
