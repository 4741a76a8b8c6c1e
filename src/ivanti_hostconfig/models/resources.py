import re
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ..templating import render_template


class Facts(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    os_family: str = Field(min_length=1)
    os_version: str = Field(min_length=1)


class Ensure(str, Enum):
    INSTALLED = "installed"


class ContentSpec(BaseModel):
    """Full file text (from a template) plus the pattern correct content must match.

    The rendered text is what gets written; ``matches`` is what the comparator
    and the acceptance check use to decide whether existing content is correct.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    template: str
    variables: dict[str, Any] = Field(default_factory=dict)
    pattern: str

    def render(self) -> str:
        return render_template(self.template, self.variables)

    def matches(self, text: str) -> bool:
        return re.search(self.pattern, text, re.MULTILINE) is not None


class PackageResource(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["package"] = "package"
    name: str = Field(min_length=1)
    ensure: Ensure = Ensure.INSTALLED

    @property
    def resource_id(self) -> str:
        return f"Package[{self.name}]"


class FileResource(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["file"] = "file"
    path: str = Field(min_length=1)
    content: ContentSpec
    mode: int | None = None
    owner: str | None = None
    group: str | None = None

    @property
    def resource_id(self) -> str:
        return f"File[{self.path}]"


DesiredResource = Annotated[Union[PackageResource, FileResource], Field(discriminator="kind")]


class Catalog(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    facts: Facts
    resources: tuple[DesiredResource, ...] = ()

    @property
    def packages(self) -> list[PackageResource]:
        return [r for r in self.resources if isinstance(r, PackageResource)]

    @property
    def files(self) -> list[FileResource]:
        return [r for r in self.resources if isinstance(r, FileResource)]

    def resource_ids(self) -> list[str]:
        return [r.resource_id for r in self.resources]
