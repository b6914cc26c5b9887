"""Task Action Service: complete, assign, involve, remove-involved and claim on runtime tasks."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from workflow_web.core.errors import BadRequestError, ConflictError, NotFoundError, NotPermittedError
from workflow_web.models.base_models import Task, TaskIdentityLink, User
from workflow_web.repositories.task_repository import TaskRepository
from workflow_web.repositories.user_repository import UserRepository
from workflow_web.services import permission_service
from workflow_web.services.representations import TaskRepresentation, UserRepresentation

logger = structlog.get_logger()

PARTICIPANT = TaskIdentityLink.TYPE_PARTICIPANT


class TaskActionService:
    def __init__(self, session: AsyncSession):
        self._tasks = TaskRepository(session)
        self._users = UserRepository(session)

    async def get_task(self, user: User, task_id: str) -> TaskRepresentation:
        task = await self._get_active_task(task_id)
        links = await self._tasks.find_identity_links(task_id)
        permission_service.validate_read_permission_on_task(user, task, links)
        return await self._to_representation(user, task, links)

    async def complete_task(self, user: User, task_id: str) -> None:
        task = await self._get_active_task(task_id)
        if not permission_service.is_task_owner_or_assignee(user, task):
            raise NotPermittedError(f"User {user.id} is not allowed to complete task {task_id}")

        task.end_time = datetime.now(timezone.utc)
        await self._tasks.save(task)
        logger.info("task_completed", task_id=task_id, user_id=user.id)

    async def assign_task(self, user: User, task_id: str, body: dict[str, Any] | None) -> TaskRepresentation:
        assignee_id = _text(body, "assignee")
        if not assignee_id:
            raise BadRequestError("Assignee is required")

        task = await self._get_active_task(task_id)
        links = await self._tasks.find_identity_links(task_id)
        permission_service.validate_read_permission_on_task(user, task, links)

        assignee = await self._users.get(assignee_id)
        if assignee is None:
            raise BadRequestError("Invalid assignee id")

        old_assignee_id = task.assignee_id
        task.assignee_id = assignee.id
        await self._tasks.save(task)

        # Previous assignee and acting user stay involved in the task
        await self._ensure_participant(task_id, old_assignee_id, links)
        await self._ensure_participant(task_id, user.id, links)
        logger.info(
            "task_assigned",
            task_id=task_id,
            assignee_id=assignee.id,
            previous_assignee_id=old_assignee_id,
            user_id=user.id,
        )

        links = await self._tasks.find_identity_links(task_id)
        return await self._to_representation(user, task, links)

    async def involve_user(self, user: User, task_id: str, body: dict[str, Any] | None) -> None:
        involved = await self._resolve_user(body)
        task = await self._get_active_task(task_id)
        links = await self._tasks.find_identity_links(task_id)
        permission_service.validate_read_permission_on_task(user, task, links)

        if await self._ensure_participant(task_id, involved.id, links):
            logger.info("task_user_involved", task_id=task_id, involved_user_id=involved.id, user_id=user.id)

    async def remove_involved_user(self, user: User, task_id: str, body: dict[str, Any] | None) -> None:
        involved = await self._resolve_user(body)
        task = await self._get_active_task(task_id)
        links = await self._tasks.find_identity_links(task_id)
        permission_service.validate_read_permission_on_task(user, task, links)

        removed = await self._tasks.delete_user_identity_link(task_id, involved.id, PARTICIPANT)
        logger.info(
            "task_user_uninvolved",
            task_id=task_id,
            involved_user_id=involved.id,
            removed=removed,
            user_id=user.id,
        )

    async def claim_task(self, user: User, task_id: str) -> None:
        task = await self._get_active_task(task_id)
        links = await self._tasks.find_identity_links(task_id)
        permission_service.validate_read_permission_on_task(user, task, links)

        if task.assignee_id == user.id:
            return
        if task.assignee_id:
            raise ConflictError(f"Task {task_id} is already claimed by another user", code="TASK_ALREADY_CLAIMED")

        task.assignee_id = user.id
        await self._tasks.save(task)
        logger.info("task_claimed", task_id=task_id, user_id=user.id)

    # ── Private ──────────────────────────────────────────

    async def _get_active_task(self, task_id: str) -> Task:
        task = await self._tasks.find_active(task_id)
        if task is None:
            raise NotFoundError(f"Task with id: {task_id} does not exist")
        return task

    async def _resolve_user(self, body: dict[str, Any] | None) -> User:
        user_id = _text(body, "userId")
        email = _text(body, "email")
        if user_id:
            found = await self._users.get(user_id)
            if found is None:
                raise NotFoundError(f"User with id: {user_id} does not exist")
            return found
        if email:
            found = await self._users.find_by_email(email)
            if found is None:
                raise NotFoundError(f"User with email: {email} does not exist")
            return found
        raise BadRequestError("User id or email is required")

    async def _ensure_participant(
        self, task_id: str, user_id: str | None, links: list[TaskIdentityLink]
    ) -> bool:
        if not user_id:
            return False
        if any(link.user_id == user_id and link.type == PARTICIPANT for link in links):
            return False
        links.append(await self._tasks.add_user_identity_link(task_id, user_id, PARTICIPANT))
        return True

    async def _to_representation(
        self, user: User, task: Task, links: list[TaskIdentityLink]
    ) -> TaskRepresentation:
        assignee = await self._users.get(task.assignee_id) if task.assignee_id else None
        involved_ids = list(dict.fromkeys(
            link.user_id for link in links if link.type == PARTICIPANT and link.user_id
        ))
        involved = await self._users.find_by_ids(involved_ids)
        return TaskRepresentation(
            id=task.id,
            name=task.name,
            description=task.description,
            assignee=UserRepresentation.from_user(assignee) if assignee else None,
            created=task.created_at,
            dueDate=task.due_date,
            endDate=task.end_time,
            priority=task.priority,
            processInstanceId=task.process_instance_id,
            processDefinitionId=task.process_definition_id,
            formKey=task.form_key,
            involvedPeople=[UserRepresentation.from_user(person) for person in involved],
            memberOfCandidateUsers=permission_service.is_candidate_user(user, links),
            memberOfCandidateGroup=permission_service.is_member_of_candidate_group(user, links),
        )


def _text(body: dict[str, Any] | None, key: str) -> str | None:
    value = (body or {}).get(key)
    if value is None:
        return None
    return str(value).strip() or None
