"""Pure permission rules: no database."""
import pytest

from workflow_web.core.errors import NotPermittedError
from workflow_web.models.base_models import Group, Task, TaskIdentityLink, User
from workflow_web.services import permission_service

CANDIDATE = TaskIdentityLink.TYPE_CANDIDATE
PARTICIPANT = TaskIdentityLink.TYPE_PARTICIPANT


def _user(user_id="u-1", *group_ids):
    return User(id=user_id, groups=[Group(id=g, name=g) for g in group_ids])


def _task(**kwargs):
    return Task(id="task-1", **kwargs)


def test_owner_and_assignee():
    assert permission_service.is_task_owner_or_assignee(_user("u-1"), _task(assignee_id="u-1"))
    assert permission_service.is_task_owner_or_assignee(_user("u-1"), _task(owner_id="u-1"))
    assert not permission_service.is_task_owner_or_assignee(_user("u-1"), _task(assignee_id="u-2"))


def test_candidate_group_membership():
    links = [TaskIdentityLink(task_id="task-1", group_id="sales", type=CANDIDATE)]

    assert permission_service.is_member_of_candidate_group(_user("u-1", "sales"), links)
    assert not permission_service.is_member_of_candidate_group(_user("u-1", "hr"), links)


def test_participant_group_link_does_not_grant_candidacy():
    links = [TaskIdentityLink(task_id="task-1", group_id="sales", type=PARTICIPANT)]

    assert not permission_service.is_member_of_candidate_group(_user("u-1", "sales"), links)


@pytest.mark.parametrize("link", [
    TaskIdentityLink(task_id="task-1", user_id="u-1", type=CANDIDATE),
    TaskIdentityLink(task_id="task-1", user_id="u-1", type=PARTICIPANT),
    TaskIdentityLink(task_id="task-1", group_id="sales", type=CANDIDATE),
])
def test_read_permission_granted_by_links(link):
    permission_service.validate_read_permission_on_task(_user("u-1", "sales"), _task(), [link])


def test_read_permission_denied():
    links = [TaskIdentityLink(task_id="task-1", user_id="u-2", type=CANDIDATE)]

    with pytest.raises(NotPermittedError):
        permission_service.validate_read_permission_on_task(_user("u-1"), _task(assignee_id="u-3"), links)

    assert not permission_service.has_read_permission_on_task(_user("u-1"), _task(assignee_id="u-3"), links)


def test_group_ids_follow_memberships():
    assert _user("u-1", "sales", "hr").group_ids == ["sales", "hr"]
    assert User(id="u-2").group_ids == []
