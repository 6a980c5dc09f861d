"""
Catalog record shapes.

Each model doubles as the shape contract a fetched record must satisfy; the
loader drops anything that fails validation instead of failing the whole load.
"""
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    StrictStr,
    ValidationInfo,
    field_validator,
    model_validator,
)


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must be a non-empty string")
    return value


NonBlankStr = Annotated[StrictStr, AfterValidator(_not_blank)]


class Product(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: NonBlankStr
    description: StrictStr
    price: StrictStr  # display string, may carry currency formatting
    link: StrictStr
    image: StrictStr
    type: StrictStr
    status: str = ""
    description_detail: str = ""
    button_text: str = ""

    @field_validator("status", "description_detail", "button_text", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Article(BaseModel):
    """
    A blog article. Older data files key articles by `link` instead of `slug`;
    which one is required is chosen through the validation context, and the
    check only runs when the loader supplies one.
    """
    model_config = ConfigDict(extra="ignore")

    title: NonBlankStr
    description: str = ""
    slug: str = ""
    link: str = ""
    imageURL: StrictStr
    content: StrictStr

    @model_validator(mode="after")
    def _check_identity(self, info: ValidationInfo) -> "Article":
        if not info.context:
            return self
        field = info.context.get("identity_field", "slug")
        if not getattr(self, field).strip():
            raise ValueError(f"article {field} must be a non-empty string")
        return self

    def key(self, identity_field: str = "slug") -> str:
        return getattr(self, identity_field)


class Comment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product_type: NonBlankStr
    author: StrictStr
    text: StrictStr
    date: str = ""


class ExpertAdvice(BaseModel):
    advantages: list[str]
    considerations: list[str]
    summary: str
