"""SQLAlchemy repository for runtime tasks and their identity links."""
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from workflow_web.models.base_models import Task, TaskIdentityLink


class TaskRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_active(self, task_id: str) -> Task | None:
        """Load a task that has not been completed yet."""
        result = await self._session.execute(
            select(Task).where(Task.id == task_id, Task.end_time.is_(None))
        )
        return result.scalar_one_or_none()

    async def find_by_process_instance_id(self, process_instance_id: str) -> list[Task]:
        """All tasks of a process instance, completed ones included."""
        result = await self._session.execute(
            select(Task).where(Task.process_instance_id == process_instance_id).order_by(Task.created_at)
        )
        return list(result.scalars())

    async def save(self, task: Task) -> Task:
        self._session.add(task)
        await self._session.flush()
        return task

    async def find_identity_links(self, task_id: str) -> list[TaskIdentityLink]:
        result = await self._session.execute(
            select(TaskIdentityLink)
            .where(TaskIdentityLink.task_id == task_id)
            .order_by(TaskIdentityLink.id)
        )
        return list(result.scalars())

    async def add_user_identity_link(self, task_id: str, user_id: str, link_type: str) -> TaskIdentityLink:
        link = TaskIdentityLink(task_id=task_id, user_id=user_id, type=link_type)
        self._session.add(link)
        await self._session.flush()
        return link

    async def delete_user_identity_link(self, task_id: str, user_id: str, link_type: str) -> int:
        result = await self._session.execute(
            delete(TaskIdentityLink)
            .where(
                TaskIdentityLink.task_id == task_id,
                TaskIdentityLink.user_id == user_id,
                TaskIdentityLink.type == link_type,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
