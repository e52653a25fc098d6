# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tag API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from tenant_admin.api.deps import (
    authorize,
    get_db,
    get_pagination,
    get_request_context,
    require_policy,
)
from tenant_admin.errors import BadRequestError
from tenant_admin.models.enums import RoleName, TagType
from tenant_admin.rbac import policies
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.common import ApiResponse, PaginatedResponse, PaginationParams
from tenant_admin.schemas.tag import (
    TagCreate,
    TagMergeRequest,
    TagMergeResult,
    TagOrderUpdate,
    TagResponse,
    TagStats,
    TagUpdate,
)
from tenant_admin.services import tag_service

READ_ROLES = (
    RoleName.SUPER_ADMIN,
    RoleName.EDITION_ADMIN,
    RoleName.COMPANY_ADMIN,
    RoleName.USER,
)
WRITE_ROLES = (RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN)

router = APIRouter()


def _edition_id(ctx: ResolvedContext) -> uuid.UUID:
    """Tags live in a system edition, so one must be resolved."""
    if not policies.can_read_tag(ctx):
        raise BadRequestError("System edition ID is required")
    return ctx.system_edition_id


def _get_tag_or_404(db: Session, ctx: ResolvedContext, tag_id: uuid.UUID):
    tag = tag_service.get_tag(db, _edition_id(ctx), tag_id)
    if not tag:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tag not found",
        )
    return tag


@router.get(
    "",
    response_model=PaginatedResponse[TagResponse],
    dependencies=[Depends(authorize(*READ_ROLES))],
)
def list_tags(
    type: TagType | None = Query(None),
    is_active: bool | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[TagResponse]:
    """List tags of the caller's system edition."""
    tags, total = tag_service.get_tags(
        db, _edition_id(ctx), pagination, tag_type=type, is_active=is_active
    )
    return PaginatedResponse[TagResponse].build(
        [TagResponse.model_validate(t) for t in tags],
        pagination,
        total,
        message="Tags retrieved successfully",
    )


@router.get(
    "/stats",
    response_model=ApiResponse[TagStats],
    dependencies=[Depends(authorize(*READ_ROLES))],
)
def get_tag_stats(
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[TagStats]:
    """Tag counts per type for the caller's system edition."""
    if not policies.can_access_tag_stats(ctx):
        raise BadRequestError("System edition ID is required")
    return ApiResponse(
        message="Tag statistics retrieved successfully",
        data=tag_service.get_tag_stats(db, ctx.system_edition_id),
    )


@router.get(
    "/type/{tag_type}",
    response_model=ApiResponse[list[TagResponse]],
    dependencies=[Depends(authorize(*READ_ROLES))],
)
def list_tags_by_type(
    tag_type: TagType,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[list[TagResponse]]:
    """List all tags of one type."""
    tags = tag_service.get_tags_by_type(db, _edition_id(ctx), tag_type)
    return ApiResponse(
        message=f"{tag_type.value.capitalize()} tags retrieved successfully",
        data=[TagResponse.model_validate(t) for t in tags],
    )


@router.put(
    "/order",
    response_model=ApiResponse[None],
    dependencies=[Depends(authorize(*WRITE_ROLES))],
)
def update_tag_order(
    data: TagOrderUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(
        require_policy(policies.can_manage_tag_order, "You cannot reorder tags")
    ),
) -> ApiResponse[None]:
    """Apply new sort positions to several tags at once."""
    tag_service.update_tag_order(db, ctx, _edition_id(ctx), data.tag_updates)
    return ApiResponse(message="Tag order updated successfully")


@router.post(
    "/merge",
    response_model=ApiResponse[TagMergeResult],
    dependencies=[Depends(authorize(*WRITE_ROLES))],
)
def merge_tags(
    data: TagMergeRequest,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(
        require_policy(policies.can_merge_tags, "You cannot merge tags")
    ),
) -> ApiResponse[TagMergeResult]:
    """Merge source tags into an existing or a new tag."""
    target = tag_service.merge_tags(
        db,
        ctx,
        _edition_id(ctx),
        data.source_tag_ids,
        target_tag_id=data.target_tag_id,
        new_tag_name=data.new_tag_name,
    )
    return ApiResponse(
        message="Tags merged successfully",
        data=TagMergeResult(merged_tag_id=target.id),
    )


@router.get(
    "/{tag_id}",
    response_model=ApiResponse[TagResponse],
    dependencies=[Depends(authorize(*READ_ROLES))],
)
def get_tag(
    tag_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[TagResponse]:
    """Get a tag by ID."""
    tag = _get_tag_or_404(db, ctx, tag_id)
    return ApiResponse(
        message="Tag retrieved successfully",
        data=TagResponse.model_validate(tag),
    )


@router.post(
    "",
    response_model=ApiResponse[TagResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(*WRITE_ROLES))],
)
def create_tag(
    data: TagCreate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(
        require_policy(policies.can_create_tag, "You cannot create tags")
    ),
) -> ApiResponse[TagResponse]:
    """Create a tag in the caller's system edition."""
    tag = tag_service.create_tag(db, ctx, _edition_id(ctx), data)
    return ApiResponse(
        message="Tag created successfully",
        data=TagResponse.model_validate(tag),
    )


@router.put(
    "/{tag_id}",
    response_model=ApiResponse[TagResponse],
    dependencies=[Depends(authorize(*WRITE_ROLES))],
)
def update_tag(
    tag_id: uuid.UUID,
    data: TagUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(
        require_policy(policies.can_update_tag, "You cannot update tags")
    ),
) -> ApiResponse[TagResponse]:
    """Update a tag."""
    tag = _get_tag_or_404(db, ctx, tag_id)
    tag = tag_service.update_tag(db, ctx, tag, data)
    return ApiResponse(
        message="Tag updated successfully",
        data=TagResponse.model_validate(tag),
    )


@router.delete(
    "/{tag_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(authorize(*WRITE_ROLES))],
)
def delete_tag(
    tag_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(
        require_policy(policies.can_delete_tag, "You cannot delete tags")
    ),
) -> ApiResponse[None]:
    """Soft delete a tag."""
    tag = _get_tag_or_404(db, ctx, tag_id)
    tag_service.delete_tag(db, ctx, tag)
    return ApiResponse(message="Tag deleted successfully")
