"""Capability cleanup API endpoints."""

from fastapi import APIRouter, Depends

from rolemanager.api.deps import get_notice_queue, get_role_manager, require_manager
from rolemanager.api.mutations import run_mutation
from rolemanager.api.schemas.common import MutationResponse
from rolemanager.api.schemas.roles import CleanupCapabilitiesRequest, CleanupResponse
from rolemanager.core.notices import NoticeQueue
from rolemanager.core.security import (
    ACTION_CLEANUP_CAPABILITIES,
    issue_action_token,
    verify_action_token,
)
from rolemanager.db.models import User
from rolemanager.services.role_manager import RoleManagerService

router = APIRouter(prefix="/capabilities", tags=["capabilities"])


@router.get("/cleanup", response_model=CleanupResponse)
async def cleanup_overview(
    current_user: User = Depends(require_manager),
    service: RoleManagerService = Depends(get_role_manager),
    notices: NoticeQueue = Depends(get_notice_queue),
):
    """Plugin and custom capabilities grouped by owning extension."""
    view = service.cleanup_view()
    return CleanupResponse(
        **view,
        notices=notices.flush(),
        tokens={
            ACTION_CLEANUP_CAPABILITIES: issue_action_token(
                ACTION_CLEANUP_CAPABILITIES, current_user.id
            )
        },
    )


@router.post("/cleanup", response_model=MutationResponse)
async def cleanup_capabilities(
    body: CleanupCapabilitiesRequest,
    current_user: User = Depends(require_manager),
    service: RoleManagerService = Depends(get_role_manager),
    notices: NoticeQueue = Depends(get_notice_queue),
):
    """Remove the selected capabilities from every role."""
    verify_action_token(body.token, ACTION_CLEANUP_CAPABILITIES, current_user.id)
    return run_mutation(notices, lambda: service.cleanup_capabilities(body.capabilities))
