"""SQLAlchemy repository for RelatedContent (content attached to tasks and process instances)."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from workflow_web.core.pagination import Page, Pageable
from workflow_web.models.base_models import RelatedContent

SORTABLE_FIELDS = {"id", "name", "created", "content_size", "field", "last_modified"}


class RelatedContentRepository:
    """Paged queries over RelatedContent, scoped to a source, task or process instance."""

    def __init__(self, session: AsyncSession):
        self._session = session

    # ── CRUD ─────────────────────────────────────────────

    async def get(self, content_id: int) -> RelatedContent | None:
        return await self._session.get(RelatedContent, content_id)

    async def save(self, content: RelatedContent) -> RelatedContent:
        self._session.add(content)
        await self._session.flush()
        return content

    async def delete(self, content: RelatedContent) -> None:
        await self._session.delete(content)
        await self._session.flush()

    # ── Queries ──────────────────────────────────────────

    async def find_all_related_by_source_and_source_id(
        self, source: str, source_id: str, pageable: Pageable
    ) -> Page[RelatedContent]:
        # Matches on source only; the related flag is not part of this lookup.
        return await self._find_page(
            pageable,
            RelatedContent.source == source,
            RelatedContent.source_id == source_id,
        )

    async def find_all_related_by_task_id(self, task_id: str, pageable: Pageable) -> Page[RelatedContent]:
        return await self._find_page(
            pageable,
            RelatedContent.task_id == task_id,
            RelatedContent.related_content.is_(True),
        )

    async def find_all_field_based_content_by_task_id(
        self, task_id: str, pageable: Pageable
    ) -> Page[RelatedContent]:
        return await self._find_page(
            pageable,
            RelatedContent.task_id == task_id,
            RelatedContent.related_content.is_(False),
        )

    async def find_all_by_task_id_and_field(
        self, task_id: str, field: str, pageable: Pageable
    ) -> Page[RelatedContent]:
        return await self._find_page(
            pageable,
            RelatedContent.task_id == task_id,
            RelatedContent.field == field,
        )

    async def find_all_related_by_process_instance_id(
        self, process_instance_id: str, pageable: Pageable
    ) -> Page[RelatedContent]:
        return await self._find_page(
            pageable,
            RelatedContent.process_instance_id == process_instance_id,
            RelatedContent.related_content.is_(True),
        )

    async def find_all_field_based_content_by_process_instance_id(
        self, process_instance_id: str, pageable: Pageable
    ) -> Page[RelatedContent]:
        return await self._find_page(
            pageable,
            RelatedContent.process_instance_id == process_instance_id,
            RelatedContent.related_content.is_(False),
        )

    async def find_all_content_by_process_instance_id(
        self, process_instance_id: str, pageable: Pageable
    ) -> Page[RelatedContent]:
        return await self._find_page(
            pageable,
            RelatedContent.process_instance_id == process_instance_id,
        )

    async def find_all_by_process_instance_id_and_field(
        self, process_instance_id: str, field: str, pageable: Pageable
    ) -> Page[RelatedContent]:
        return await self._find_page(
            pageable,
            RelatedContent.process_instance_id == process_instance_id,
            RelatedContent.field == field,
        )

    async def delete_all_content_by_process_instance_id(self, process_instance_id: str) -> int:
        """Bulk delete, bypassing the session identity map. Returns the deleted row count."""
        result = await self._session.execute(
            delete(RelatedContent)
            .where(RelatedContent.process_instance_id == process_instance_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def get_total_content_size_for_user(self, user_id: str) -> int | None:
        """Sum of content_size created by user_id; None when the user has no content."""
        result = await self._session.execute(
            select(func.sum(RelatedContent.content_size)).where(RelatedContent.created_by == user_id)
        )
        total = result.scalar()
        return int(total) if total is not None else None

    async def exists_by_process_instance_id_and_created_by(self, process_instance_id: str, user_id: str) -> bool:
        result = await self._session.execute(
            select(RelatedContent.id)
            .where(
                RelatedContent.process_instance_id == process_instance_id,
                RelatedContent.created_by == user_id,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    # ── Private ──────────────────────────────────────────

    async def _find_page(self, pageable: Pageable, *criteria) -> Page[RelatedContent]:
        stmt = select(RelatedContent).where(*criteria)
        count_stmt = select(func.count()).select_from(RelatedContent).where(*criteria)

        order_by = [sort.to_clause(RelatedContent, SORTABLE_FIELDS) for sort in pageable.sort]
        stmt = stmt.order_by(*order_by, RelatedContent.id).limit(pageable.size).offset(pageable.offset)

        result = await self._session.execute(stmt)
        total = (await self._session.execute(count_stmt)).scalar() or 0
        return Page(
            content=list(result.scalars()),
            total_elements=total,
            number=pageable.page,
            size=pageable.size,
        )
