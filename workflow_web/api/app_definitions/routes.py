"""
App definition API.
GET /rest/app-definitions: app definitions created by or shared with the current user.
GET /rest/app-definitions/deployable: highest non-removed version of each app the user can deploy.
"""
import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from workflow_web.core.database import get_session
from workflow_web.core.errors import ServiceError
from workflow_web.core.security import get_current_user
from workflow_web.models.base_models import User
from workflow_web.services.app_definition_service import AppDefinitionService
from workflow_web.services.representations import (
    AppDefinitionServiceRepresentation,
    ResultListDataRepresentation,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/app-definitions", tags=["app-definitions"])


@router.get("", response_model=ResultListDataRepresentation[AppDefinitionServiceRepresentation])
async def list_app_definitions(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        definitions = await AppDefinitionService(db).get_app_definitions(current_user)
        return ResultListDataRepresentation.of(definitions)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("app_definitions_list_failed", user_id=current_user.id)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/deployable", response_model=ResultListDataRepresentation[AppDefinitionServiceRepresentation])
async def list_deployable_app_definitions(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    try:
        definitions = await AppDefinitionService(db).get_deployable_app_definitions(current_user)
        return ResultListDataRepresentation.of(definitions)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
    except Exception:
        logger.exception("deployable_app_definitions_list_failed", user_id=current_user.id)
        raise HTTPException(status_code=500, detail="Internal Server Error")
