"""
Task API.
GET /rest/tasks/{taskId}: task representation.
PUT /rest/tasks/{taskId}/action/complete: complete (owner or assignee only).
PUT /rest/tasks/{taskId}/action/assign: set assignee, returns the task.
PUT /rest/tasks/{taskId}/action/involve: add an involved user.
PUT /rest/tasks/{taskId}/action/remove-involved: remove an involved user.
PUT /rest/tasks/{taskId}/action/claim: claim as current user.
"""
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from workflow_web.core.database import get_session
from workflow_web.core.errors import ServiceError
from workflow_web.core.security import get_current_user
from workflow_web.models.base_models import User
from workflow_web.services.representations import TaskRepresentation
from workflow_web.services.task_action_service import TaskActionService

logger = structlog.get_logger()

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/{task_id}", response_model=TaskRepresentation)
async def get_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        return await TaskActionService(db).get_task(current_user, task_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("task_get_failed", task_id=task_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.put("/{task_id}/action/complete", status_code=status.HTTP_200_OK)
async def complete_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        await TaskActionService(db).complete_task(current_user, task_id)
        await db.commit()
        return Response(status_code=status.HTTP_200_OK)
    except ServiceError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        await db.rollback()
        logger.exception("task_action_failed", action="complete", task_id=task_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.put("/{task_id}/action/assign", response_model=TaskRepresentation)
async def assign_task(
    task_id: str,
    request_node: dict[str, Any] | None = Body(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        result = await TaskActionService(db).assign_task(current_user, task_id, request_node)
        await db.commit()
        return result
    except ServiceError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        await db.rollback()
        logger.exception("task_action_failed", action="assign", task_id=task_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.put("/{task_id}/action/involve", status_code=status.HTTP_200_OK)
async def involve_user(
    task_id: str,
    request_node: dict[str, Any] | None = Body(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        await TaskActionService(db).involve_user(current_user, task_id, request_node)
        await db.commit()
        return Response(status_code=status.HTTP_200_OK)
    except ServiceError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        await db.rollback()
        logger.exception("task_action_failed", action="involve", task_id=task_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.put("/{task_id}/action/remove-involved", status_code=status.HTTP_200_OK)
async def remove_involved_user(
    task_id: str,
    request_node: dict[str, Any] | None = Body(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        await TaskActionService(db).remove_involved_user(current_user, task_id, request_node)
        await db.commit()
        return Response(status_code=status.HTTP_200_OK)
    except ServiceError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        await db.rollback()
        logger.exception("task_action_failed", action="remove-involved", task_id=task_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.put("/{task_id}/action/claim", status_code=status.HTTP_200_OK)
async def claim_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        await TaskActionService(db).claim_task(current_user, task_id)
        await db.commit()
        return Response(status_code=status.HTTP_200_OK)
    except ServiceError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        await db.rollback()
        logger.exception("task_action_failed", action="claim", task_id=task_id)
        raise HTTPException(status_code=500, detail="Internal Server Error")
