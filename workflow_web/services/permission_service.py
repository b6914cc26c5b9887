"""Task permission checks."""
from __future__ import annotations

from workflow_web.core.errors import NotPermittedError
from workflow_web.models.base_models import Task, TaskIdentityLink, User


def is_task_owner_or_assignee(user: User, task: Task) -> bool:
    return user.id in (task.assignee_id, task.owner_id)


def is_candidate_user(user: User, links: list[TaskIdentityLink]) -> bool:
    return any(
        link.type == TaskIdentityLink.TYPE_CANDIDATE and link.user_id == user.id
        for link in links
    )


def is_member_of_candidate_group(user: User, links: list[TaskIdentityLink]) -> bool:
    group_ids = set(user.group_ids)
    return any(
        link.type == TaskIdentityLink.TYPE_CANDIDATE and link.group_id in group_ids
        for link in links
        if link.group_id
    )


def is_involved(user: User, links: list[TaskIdentityLink]) -> bool:
    return any(
        link.type == TaskIdentityLink.TYPE_PARTICIPANT and link.user_id == user.id
        for link in links
    )


def has_read_permission_on_task(user: User, task: Task, links: list[TaskIdentityLink]) -> bool:
    return (
        is_task_owner_or_assignee(user, task)
        or is_involved(user, links)
        or is_candidate_user(user, links)
        or is_member_of_candidate_group(user, links)
    )


def validate_read_permission_on_task(user: User, task: Task, links: list[TaskIdentityLink]) -> None:
    """Raise NotPermittedError unless the user is assignee, owner, involved or a candidate."""
    if has_read_permission_on_task(user, task, links):
        return
    raise NotPermittedError(f"User {user.id} has no access to task {task.id}")
