"""Request and response shapes of the portal REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

APPLICATION_CODE = "commerce-cloud"


class PortalModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python, unknown keys kept."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class BuildMeta(PortalModel):
    code: str
    name: str = ""
    branch: str = ""
    status: str = ""
    build_version: str = ""
    created_by: str = ""
    subscription_code: str = ""
    application_code: str = ""
    build_start_timestamp: str | None = None
    build_end_timestamp: str | None = None


class BuildPage(PortalModel):
    count: int = 0
    value: list[BuildMeta] = Field(default_factory=list)


class NewBuild(PortalModel):
    application_code: str = APPLICATION_CODE
    subscription_code: str
    name: str
    branch: str


class BuildResponse(PortalModel):
    code: str


class Deployment(PortalModel):
    code: str
    build_code: str = ""
    environment_code: str = ""
    database_update_mode: str = ""
    strategy: str = ""
    status: str = ""
    created_by: str = ""
    scheduled_timestamp: str | None = None
    deployed_timestamp: str | None = None
    failed_timestamp: str | None = None


class DeploymentPage(PortalModel):
    count: int = 0
    value: list[Deployment] = Field(default_factory=list)


class NewDeployment(PortalModel):
    """Deployment request.

    ``database_update_mode`` is one of NONE, UPDATE, INITIALIZE and
    ``strategy`` one of ROLLING_UPDATE, RECREATE.
    """

    environment_code: str
    database_update_mode: str
    strategy: str
    build_code: str


class DeploymentResponse(PortalModel):
    code: str


class InitialPasswords(PortalModel):
    """Initial admin passwords of an environment; the portal returns a flat object."""

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class Properties(PortalModel):
    key: str
    value: str = ""
