"""
Related content API.
GET /rest/tasks/{taskId}/content: related content of a task.
GET /rest/tasks/{taskId}/field-content: field-based content of a task (optionally one field).
GET /rest/process-instances/{processInstanceId}/content: related content (or one field's content).
GET /rest/process-instances/{processInstanceId}/field-content: field-based content.
GET /rest/process-instances/{processInstanceId}/all-content: every attachment of the process instance.
DELETE /rest/process-instances/{processInstanceId}/content: delete all content of a process instance.
GET /rest/content: content by source and source id.
GET /rest/content/usage: total content size created by the current user.
"""
import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from workflow_web.core.config import settings
from workflow_web.core.database import get_session
from workflow_web.core.errors import ServiceError
from workflow_web.core.pagination import Pageable, Sort
from workflow_web.core.security import get_current_user
from workflow_web.models.base_models import User
from workflow_web.services.related_content_service import RelatedContentService
from workflow_web.services.representations import (
    RelatedContentRepresentation,
    ResultListDataRepresentation,
)

logger = structlog.get_logger()

router = APIRouter(tags=["content"])

ContentList = ResultListDataRepresentation[RelatedContentRepresentation]


def get_pageable(
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
) -> Pageable:
    return Pageable.of(page, size, Sort.asc("created"), max_size=settings.MAX_PAGE_SIZE)


@router.get("/tasks/{task_id}/content", response_model=ContentList)
async def get_task_content(
    task_id: str,
    pageable: Pageable = Depends(get_pageable),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        return await RelatedContentService(db).get_task_content(current_user, task_id, pageable)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("task_content_list_failed", task_id=task_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/tasks/{task_id}/field-content", response_model=ContentList)
async def get_task_field_content(
    task_id: str,
    field: str | None = None,
    pageable: Pageable = Depends(get_pageable),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        return await RelatedContentService(db).get_task_field_content(current_user, task_id, pageable, field)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("task_field_content_list_failed", task_id=task_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/process-instances/{process_instance_id}/content", response_model=ContentList)
async def get_process_instance_content(
    process_instance_id: str,
    field: str | None = None,
    pageable: Pageable = Depends(get_pageable),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        return await RelatedContentService(db).get_process_instance_content(
            current_user, process_instance_id, pageable, field
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("process_instance_content_list_failed", process_instance_id=process_instance_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/process-instances/{process_instance_id}/field-content", response_model=ContentList)
async def get_process_instance_field_content(
    process_instance_id: str,
    pageable: Pageable = Depends(get_pageable),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        return await RelatedContentService(db).get_process_instance_field_content(
            current_user, process_instance_id, pageable
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("process_instance_field_content_list_failed", process_instance_id=process_instance_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/process-instances/{process_instance_id}/all-content", response_model=ContentList)
async def get_all_process_instance_content(
    process_instance_id: str,
    pageable: Pageable = Depends(get_pageable),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        return await RelatedContentService(db).get_all_process_instance_content(
            current_user, process_instance_id, pageable
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("process_instance_all_content_list_failed", process_instance_id=process_instance_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.delete("/process-instances/{process_instance_id}/content")
async def delete_process_instance_content(
    process_instance_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        deleted = await RelatedContentService(db).delete_process_instance_content(current_user, process_instance_id)
        await db.commit()
        return {"deleted": deleted}
    except ServiceError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        await db.rollback()
        logger.exception("process_instance_content_delete_failed", process_instance_id=process_instance_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/content", response_model=ContentList)
async def get_source_content(
    source: str,
    source_id: str = Query(..., alias="sourceId"),
    pageable: Pageable = Depends(get_pageable),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        return await RelatedContentService(db).get_source_content(source, source_id, pageable)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("source_content_list_failed", source=source, source_id=source_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/content/usage")
async def get_content_usage(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        return await RelatedContentService(db).get_content_usage(current_user)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("content_usage_failed", user_id=current_user.id)
        raise HTTPException(status_code=500, detail="Internal Server Error")
