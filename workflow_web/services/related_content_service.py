"""Related Content Service: content listings for tasks and process instances."""
from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from workflow_web.core.errors import NotFoundError, NotPermittedError
from workflow_web.core.pagination import Pageable
from workflow_web.models.base_models import User
from workflow_web.repositories.related_content_repository import RelatedContentRepository
from workflow_web.repositories.task_repository import TaskRepository
from workflow_web.services import permission_service
from workflow_web.services.representations import (
    RelatedContentRepresentation,
    ResultListDataRepresentation,
)

logger = structlog.get_logger()


def _to_result_list(page) -> ResultListDataRepresentation:
    return ResultListDataRepresentation.of_page(
        page, [RelatedContentRepresentation.from_entity(content) for content in page.content]
    )


class RelatedContentService:
    def __init__(self, session: AsyncSession):
        self._content = RelatedContentRepository(session)
        self._tasks = TaskRepository(session)

    async def get_task_content(
        self, user: User, task_id: str, pageable: Pageable
    ) -> ResultListDataRepresentation:
        await self._check_task_access(user, task_id)
        return _to_result_list(await self._content.find_all_related_by_task_id(task_id, pageable))

    async def get_task_field_content(
        self, user: User, task_id: str, pageable: Pageable, field: str | None = None
    ) -> ResultListDataRepresentation:
        await self._check_task_access(user, task_id)
        if field:
            page = await self._content.find_all_by_task_id_and_field(task_id, field, pageable)
        else:
            page = await self._content.find_all_field_based_content_by_task_id(task_id, pageable)
        return _to_result_list(page)

    async def get_process_instance_content(
        self, user: User, process_instance_id: str, pageable: Pageable, field: str | None = None
    ) -> ResultListDataRepresentation:
        await self._check_process_instance_access(user, process_instance_id)
        if field:
            page = await self._content.find_all_by_process_instance_id_and_field(
                process_instance_id, field, pageable
            )
        else:
            page = await self._content.find_all_related_by_process_instance_id(process_instance_id, pageable)
        return _to_result_list(page)

    async def get_process_instance_field_content(
        self, user: User, process_instance_id: str, pageable: Pageable
    ) -> ResultListDataRepresentation:
        await self._check_process_instance_access(user, process_instance_id)
        page = await self._content.find_all_field_based_content_by_process_instance_id(
            process_instance_id, pageable
        )
        return _to_result_list(page)

    async def get_all_process_instance_content(
        self, user: User, process_instance_id: str, pageable: Pageable
    ) -> ResultListDataRepresentation:
        await self._check_process_instance_access(user, process_instance_id)
        page = await self._content.find_all_content_by_process_instance_id(process_instance_id, pageable)
        return _to_result_list(page)

    async def get_source_content(
        self, source: str, source_id: str, pageable: Pageable
    ) -> ResultListDataRepresentation:
        page = await self._content.find_all_related_by_source_and_source_id(source, source_id, pageable)
        return _to_result_list(page)

    async def delete_process_instance_content(self, user: User, process_instance_id: str) -> int:
        await self._check_process_instance_access(user, process_instance_id)
        deleted = await self._content.delete_all_content_by_process_instance_id(process_instance_id)
        logger.info(
            "process_instance_content_deleted",
            process_instance_id=process_instance_id,
            deleted=deleted,
            user_id=user.id,
        )
        return deleted

    async def get_content_usage(self, user: User) -> dict:
        total = await self._content.get_total_content_size_for_user(user.id)
        return {"userId": user.id, "totalContentSize": total or 0}

    async def _check_task_access(self, user: User, task_id: str) -> None:
        task = await self._tasks.find_active(task_id)
        if task is None:
            raise NotFoundError(f"Task with id: {task_id} does not exist")
        links = await self._tasks.find_identity_links(task_id)
        permission_service.validate_read_permission_on_task(user, task, links)

    async def _check_process_instance_access(self, user: User, process_instance_id: str) -> None:
        """Access is granted by read permission on any task of the instance, or by owning some of its content."""
        for task in await self._tasks.find_by_process_instance_id(process_instance_id):
            links = await self._tasks.find_identity_links(task.id)
            if permission_service.has_read_permission_on_task(user, task, links):
                return
        if await self._content.exists_by_process_instance_id_and_created_by(process_instance_id, user.id):
            return
        logger.warning("process_instance_access_denied", process_instance_id=process_instance_id, user_id=user.id)
        raise NotPermittedError(f"User {user.id} has no access to process instance {process_instance_id}")
