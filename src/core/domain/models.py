"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Cloud Manager and IMS return loosely typed JSON; these models are the
  narrow shapes the CLI actually uses for menus and persistence.
- They describe *what* the records are, not *how* they are fetched.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Organization(BaseModel):
    """IMS organization the user belongs to."""

    name: str = Field(..., description="Display name (`orgName`).")
    id: str = Field(..., min_length=1, description="Composite id `ident@authSrc`.")


class Program(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str = Field(..., description="Cloud Manager program id.")
    name: str | None = Field(default=None, description="Program display name.")


class Environment(BaseModel):
    """Deployable runtime instance (dev/stage/prod/rde) of a program."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str = Field(..., description="Environment id.")
    name: str | None = Field(default=None, description="Environment display name.")
    type: str | None = Field(default=None, description="Environment type, e.g. `dev` or `prod`.")
    status: str | None = Field(default=None, description="Provisioning status, e.g. `ready`.")


class Site(BaseModel):
    """Edge Delivery site, i.e. a Cloud Manager domain mapping."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str = Field(..., description="Domain mapping id.")
    name: str | None = Field(default=None, description="Mapped domain name.")


class Selection(BaseModel):
    """Values persisted by `setup` and read back by the compute commands."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    org_id: str | None = None
    program_id: str | None = None
    program_name: str | None = None
    environment_id: str | None = None
    environment_name: str | None = None
    edge_delivery: bool = False
