"""Schemas for organization lookup."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class OrganizationSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    is_verified: bool


class OrganizationPage(BaseModel):
    organizations: list[OrganizationSummary]
    total: int
