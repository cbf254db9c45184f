"""Role management API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from rolemanager.api.deps import get_notice_queue, get_role_manager, require_manager
from rolemanager.api.mutations import run_mutation
from rolemanager.api.schemas.common import MutationResponse
from rolemanager.api.schemas.roles import (
    CopyCapabilitiesRequest,
    DeleteRolesRequest,
    QuickRemoveRequest,
    RoleEditResponse,
    RoleListResponse,
    UpdateCapabilitiesRequest,
)
from rolemanager.core.errors import NotFound, RecoverableError
from rolemanager.core.notices import NoticeQueue
from rolemanager.core.security import (
    ACTION_COPY_CAPABILITIES,
    ACTION_DELETE_ROLES,
    ACTION_QUICK_REMOVE,
    ACTION_UPDATE_CAPABILITIES,
    issue_action_token,
    verify_action_token,
)
from rolemanager.db.models import User
from rolemanager.services.role_manager import RoleManagerService

router = APIRouter(prefix="/roles", tags=["roles"])


# Views
@router.get("", response_model=RoleListResponse)
async def list_roles(
    current_user: User = Depends(require_manager),
    service: RoleManagerService = Depends(get_role_manager),
    notices: NoticeQueue = Depends(get_notice_queue),
):
    """List all roles with user counts and capability previews."""
    view = service.role_list_view()
    return RoleListResponse(
        **view,
        notices=notices.flush(),
        tokens={ACTION_DELETE_ROLES: issue_action_token(ACTION_DELETE_ROLES, current_user.id)},
    )


@router.get("/{slug}", response_model=RoleEditResponse)
async def get_role(
    slug: str,
    current_user: User = Depends(require_manager),
    service: RoleManagerService = Depends(get_role_manager),
    notices: NoticeQueue = Depends(get_notice_queue),
):
    """Current and available capabilities of a role."""
    try:
        view = service.role_edit_view(slug)
    except RecoverableError as exc:
        status_code = 404 if isinstance(exc, NotFound) else 400
        raise HTTPException(status_code=status_code, detail=exc.message)

    return RoleEditResponse(
        **view,
        notices=notices.flush(),
        tokens={
            action: issue_action_token(action, current_user.id)
            for action in (ACTION_UPDATE_CAPABILITIES, ACTION_COPY_CAPABILITIES, ACTION_QUICK_REMOVE)
        },
    )


# Mutations
@router.post("/delete", response_model=MutationResponse)
async def delete_roles(
    body: DeleteRolesRequest,
    current_user: User = Depends(require_manager),
    service: RoleManagerService = Depends(get_role_manager),
    notices: NoticeQueue = Depends(get_notice_queue),
):
    """Delete roles. Users of deleted roles move to the fallback role."""
    verify_action_token(body.token, ACTION_DELETE_ROLES, current_user.id)
    return run_mutation(notices, lambda: service.delete_roles(body.roles))


@router.post("/{slug}/capabilities", response_model=MutationResponse)
async def update_capabilities(
    slug: str,
    body: UpdateCapabilitiesRequest,
    current_user: User = Depends(require_manager),
    service: RoleManagerService = Depends(get_role_manager),
    notices: NoticeQueue = Depends(get_notice_queue),
):
    """Add or remove capabilities on a role."""
    verify_action_token(body.token, ACTION_UPDATE_CAPABILITIES, current_user.id)
    return run_mutation(
        notices,
        lambda: service.update_capabilities(slug, body.operation, body.capabilities),
    )


@router.post("/{slug}/copy", response_model=MutationResponse)
async def copy_capabilities(
    slug: str,
    body: CopyCapabilitiesRequest,
    current_user: User = Depends(require_manager),
    service: RoleManagerService = Depends(get_role_manager),
    notices: NoticeQueue = Depends(get_notice_queue),
):
    """Replace this role's capabilities with those of the source role."""
    verify_action_token(body.token, ACTION_COPY_CAPABILITIES, current_user.id)
    return run_mutation(notices, lambda: service.copy_capabilities(body.source_role, slug))


@router.post("/{slug}/capabilities/quick-remove", response_model=MutationResponse)
async def quick_remove_capability(
    slug: str,
    body: QuickRemoveRequest,
    current_user: User = Depends(require_manager),
    service: RoleManagerService = Depends(get_role_manager),
    notices: NoticeQueue = Depends(get_notice_queue),
):
    """Remove a single capability in place; the result is returned, not queued."""
    verify_action_token(body.token, ACTION_QUICK_REMOVE, current_user.id)
    return run_mutation(
        notices,
        lambda: service.quick_remove_capability(slug, body.capability),
        queue_notice=False,
    )
