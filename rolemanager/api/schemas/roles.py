"""Role and capability schemas for the role manager API."""

from typing import List, Optional
from pydantic import BaseModel, Field

from .common import ViewResponse


# Views

class RoleSummary(BaseModel):
    slug: str
    name: str
    is_protected: bool
    deletable: bool
    plugin_owner: Optional[str] = None
    user_count: int
    capability_count: int
    capabilities: List[str]
    capability_preview: str


class RoleListResponse(ViewResponse):
    roles: List[RoleSummary]
    total_roles: int
    protected_count: int
    custom_count: int


class CapabilityInfo(BaseModel):
    name: str
    granted: bool
    type: str = Field(..., description="builtin or custom")
    is_builtin: bool


class RoleOption(BaseModel):
    slug: str
    name: str


class RoleEditResponse(ViewResponse):
    slug: str
    name: str
    is_protected: bool
    plugin_owner: Optional[str] = None
    user_count: int
    current_capabilities: List[CapabilityInfo]
    available_capabilities: List[CapabilityInfo]
    copy_sources: List[RoleOption]


class CapabilityUsage(BaseModel):
    name: str
    role_count: int


class CapabilityGroup(BaseModel):
    name: str
    capabilities: List[CapabilityUsage]


class CleanupResponse(ViewResponse):
    groups: List[CapabilityGroup]
    total_capabilities: int
    total_groups: int
    total_roles: int


# Mutations

class TokenRequest(BaseModel):
    token: Optional[str] = Field(None, description="Anti-forgery token issued with the view")


class DeleteRolesRequest(TokenRequest):
    roles: List[str] = Field(default_factory=list)


class UpdateCapabilitiesRequest(TokenRequest):
    operation: str = Field("", description="add or remove")
    capabilities: List[str] = Field(default_factory=list)


class CopyCapabilitiesRequest(TokenRequest):
    source_role: str = ""


class CleanupCapabilitiesRequest(TokenRequest):
    capabilities: List[str] = Field(default_factory=list)


class QuickRemoveRequest(TokenRequest):
    capability: str = ""
