"""Response representations returned by services and serialized by routes."""
from __future__ import annotations

from datetime import datetime
from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel

from workflow_web.core.pagination import Page
from workflow_web.models.base_models import RelatedContent, User

T = TypeVar("T")


class ResultListDataRepresentation(BaseModel, Generic[T]):
    size: int
    total: int
    start: int
    data: list[T]

    @classmethod
    def of(cls, data: Sequence[T]) -> "ResultListDataRepresentation[T]":
        return cls(size=len(data), total=len(data), start=0, data=list(data))

    @classmethod
    def of_page(cls, page: Page, data: Sequence[T]) -> "ResultListDataRepresentation[T]":
        return cls(size=len(data), total=page.total_elements, start=page.start, data=list(data))


class AppDefinitionServiceRepresentation(BaseModel):
    id: int
    name: str | None = None
    description: str | None = None
    version: int | None = None
    definition: str | None = None
    theme: str | None = None
    icon: str | None = None
    models: list[int | None] | None = None


class UserRepresentation(BaseModel):
    id: str
    email: str | None = None
    firstName: str | None = None
    lastName: str | None = None
    fullName: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserRepresentation":
        return cls(
            id=user.id,
            email=user.email,
            firstName=user.first_name,
            lastName=user.last_name,
            fullName=user.full_name or None,
        )


class TaskRepresentation(BaseModel):
    id: str
    name: str | None = None
    description: str | None = None
    assignee: UserRepresentation | None = None
    created: datetime | None = None
    dueDate: datetime | None = None
    endDate: datetime | None = None
    priority: int | None = None
    processInstanceId: str | None = None
    processDefinitionId: str | None = None
    formKey: str | None = None
    involvedPeople: list[UserRepresentation] = []
    memberOfCandidateUsers: bool = False
    memberOfCandidateGroup: bool = False


class RelatedContentRepresentation(BaseModel):
    id: int
    name: str
    created: datetime | None = None
    createdBy: str | None = None
    contentAvailable: bool = False
    link: bool = False
    linkUrl: str | None = None
    source: str | None = None
    sourceId: str | None = None
    mimeType: str | None = None
    field: str | None = None
    contentSize: int | None = None
    taskId: str | None = None
    processInstanceId: str | None = None

    @classmethod
    def from_entity(cls, content: RelatedContent) -> "RelatedContentRepresentation":
        return cls(
            id=content.id,
            name=content.name,
            created=content.created,
            createdBy=content.created_by,
            contentAvailable=bool(content.content_available),
            link=bool(content.link),
            linkUrl=content.link_url,
            source=content.source,
            sourceId=content.source_id,
            mimeType=content.mime_type,
            field=content.field,
            contentSize=content.content_size,
            taskId=content.task_id,
            processInstanceId=content.process_instance_id,
        )
