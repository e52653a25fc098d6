# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tag service for managing system edition tags."""

import logging
import uuid

from sqlalchemy.orm import Query, Session

from tenant_admin.errors import BadRequestError, NotFoundError
from tenant_admin.models import Tag
from tenant_admin.models.enums import AuditModule, TagType
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.common import PaginationParams
from tenant_admin.schemas.tag import (
    TagCreate,
    TagOrderItem,
    TagStats,
    TagTypeCounts,
    TagUpdate,
)
from tenant_admin.services import audit_log_service

logger = logging.getLogger(__name__)


def _edition_tags(db: Session, system_edition_id: uuid.UUID) -> Query:
    return db.query(Tag).filter(
        Tag.system_edition_id == system_edition_id,
        Tag.deleted_at.is_(None),
    )


def _ordered(query: Query) -> Query:
    return query.order_by(Tag.sort_order.asc(), Tag.created_at.desc())


def get_tags(
    db: Session,
    system_edition_id: uuid.UUID,
    params: PaginationParams,
    tag_type: TagType | None = None,
    is_active: bool | None = None,
) -> tuple[list[Tag], int]:
    """Get a page of tags of a system edition.

    Tags are ordered by sort order, newest first within the same position.
    """
    query = _edition_tags(db, system_edition_id)
    if params.search:
        query = query.filter(Tag.name.ilike(f"%{params.search}%"))
    if tag_type is not None:
        query = query.filter(Tag.type == tag_type)
    if is_active is not None:
        query = query.filter(Tag.is_active.is_(is_active))

    total = query.count()
    tags = _ordered(query).offset(params.offset).limit(params.limit).all()
    return tags, total


def get_tags_by_type(
    db: Session, system_edition_id: uuid.UUID, tag_type: TagType
) -> list[Tag]:
    """Get all tags of one type in a system edition."""
    return _ordered(
        _edition_tags(db, system_edition_id).filter(Tag.type == tag_type)
    ).all()


def get_tag(db: Session, system_edition_id: uuid.UUID, tag_id: uuid.UUID) -> Tag | None:
    """Get a tag by ID. Tags of other system editions are not found."""
    return _edition_tags(db, system_edition_id).filter(Tag.id == tag_id).first()


def get_tag_stats(db: Session, system_edition_id: uuid.UUID) -> TagStats:
    """Count tags per type, and active tags per type."""
    by_type = TagTypeCounts()
    active = TagTypeCounts()
    for tag in _edition_tags(db, system_edition_id).all():
        key = tag.type.value
        setattr(by_type, key, getattr(by_type, key) + 1)
        if tag.is_active:
            setattr(active, key, getattr(active, key) + 1)

    total = by_type.document + by_type.note + by_type.certificate
    return TagStats(total=total, by_type=by_type, active=active)


def create_tag(
    db: Session, ctx: ResolvedContext, system_edition_id: uuid.UUID, data: TagCreate
) -> Tag:
    """Create a tag in a system edition."""
    tag = Tag(
        system_edition_id=system_edition_id,
        name=data.name,
        color=data.color,
        type=data.type,
        is_active=data.is_active,
        sort_order=data.sort_order,
    )
    db.add(tag)
    db.flush()

    audit_log_service.record(
        db,
        ctx,
        action="tag_created",
        module=AuditModule.SETTINGS,
        description=f"Created {tag.type.value} tag '{tag.name}'",
        metadata={"tag_id": str(tag.id)},
        system_edition_id=system_edition_id,
    )
    db.commit()
    db.refresh(tag)
    return tag


def update_tag(db: Session, ctx: ResolvedContext, tag: Tag, data: TagUpdate) -> Tag:
    """Update a tag."""
    if data.name is not None:
        tag.name = data.name.strip()
    if data.color is not None:
        tag.color = data.color
    if data.type is not None:
        tag.type = data.type
    if data.is_active is not None:
        tag.is_active = data.is_active
    if data.sort_order is not None:
        tag.sort_order = data.sort_order

    audit_log_service.record(
        db,
        ctx,
        action="tag_updated",
        module=AuditModule.SETTINGS,
        description=f"Updated tag '{tag.name}'",
        metadata={"tag_id": str(tag.id)},
        system_edition_id=tag.system_edition_id,
    )
    db.commit()
    db.refresh(tag)
    return tag


def delete_tag(db: Session, ctx: ResolvedContext, tag: Tag) -> None:
    """Soft delete a tag."""
    tag.soft_delete()
    audit_log_service.record(
        db,
        ctx,
        action="tag_deleted",
        module=AuditModule.SETTINGS,
        description=f"Deleted tag '{tag.name}'",
        metadata={"tag_id": str(tag.id)},
        system_edition_id=tag.system_edition_id,
    )
    db.commit()


def update_tag_order(
    db: Session,
    ctx: ResolvedContext,
    system_edition_id: uuid.UUID,
    updates: list[TagOrderItem],
) -> None:
    """Apply new sort positions to several tags in one transaction.

    Raises:
        NotFoundError: If any tag does not belong to the system edition.
    """
    ids = {item.id for item in updates}
    tags = {
        tag.id: tag
        for tag in _edition_tags(db, system_edition_id).filter(Tag.id.in_(ids)).all()
    }
    missing = ids - tags.keys()
    if missing:
        raise NotFoundError(f"Tag not found: {sorted(str(i) for i in missing)[0]}")

    try:
        for item in updates:
            tags[item.id].sort_order = item.sort_order
        audit_log_service.record(
            db,
            ctx,
            action="tag_order_updated",
            module=AuditModule.SETTINGS,
            description=f"Reordered {len(updates)} tags",
            system_edition_id=system_edition_id,
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to reorder tags in system edition {system_edition_id}")
        raise

    logger.info(f"Reordered {len(updates)} tags in system edition {system_edition_id}")


def merge_tags(
    db: Session,
    ctx: ResolvedContext,
    system_edition_id: uuid.UUID,
    source_tag_ids: list[uuid.UUID],
    target_tag_id: uuid.UUID | None = None,
    new_tag_name: str | None = None,
) -> Tag:
    """Merge source tags into an existing or a newly created tag.

    Source tags must all belong to the system edition and share one type.
    They are soft-deleted once the target exists. Everything happens in one
    transaction.

    Raises:
        NotFoundError: If a source or the target tag is missing.
        BadRequestError: If the tags cannot be merged.
    """
    source_ids = list(dict.fromkeys(source_tag_ids))
    sources = _edition_tags(db, system_edition_id).filter(Tag.id.in_(source_ids)).all()
    if not sources:
        raise NotFoundError("No source tags found")
    if len(sources) != len(source_ids):
        raise NotFoundError("One or more source tags not found")

    tag_type = sources[0].type
    if any(tag.type != tag_type for tag in sources):
        raise BadRequestError(
            "All source tags must be of the same type (document, note, or certificate)"
        )

    try:
        if target_tag_id is not None:
            if target_tag_id in source_ids:
                raise BadRequestError("Target tag cannot be one of the source tags")
            target = get_tag(db, system_edition_id, target_tag_id)
            if target is None:
                raise NotFoundError("Target tag not found")
        elif new_tag_name:
            first = sources[0]
            target = Tag(
                system_edition_id=first.system_edition_id,
                name=new_tag_name.strip(),
                type=first.type,
                is_active=True,
                sort_order=first.sort_order,
                color=first.color,
            )
            db.add(target)
            db.flush()
        else:
            raise BadRequestError("Either target_tag_id or new_tag_name must be provided")

        for tag in sources:
            tag.soft_delete()

        audit_log_service.record(
            db,
            ctx,
            action="tags_merged",
            module=AuditModule.SETTINGS,
            description=f"Merged {len(sources)} tags into '{target.name}'",
            metadata={
                "source_tag_ids": [str(tag.id) for tag in sources],
                "merged_tag_id": str(target.id),
            },
            system_edition_id=system_edition_id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(target)
    logger.info(
        f"Merged {len(sources)} tags into {target.id} in system edition {system_edition_id}"
    )
    return target
