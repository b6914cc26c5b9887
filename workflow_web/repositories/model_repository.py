"""SQLAlchemy repositories for models, model history snapshots and model sharing."""
from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from workflow_web.core.pagination import Sort
from workflow_web.models.base_models import Model, ModelHistory, ModelShareInfo

SORTABLE_FIELDS = {"id", "name", "created", "last_updated", "version"}


class ModelRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, model_id: int) -> Model | None:
        return await self._session.get(Model, model_id)

    async def save(self, model: Model) -> Model:
        self._session.add(model)
        await self._session.flush()
        return model

    async def find_models_created_by(self, user_id: str, model_type: int, sort: Sort) -> list[Model]:
        stmt = (
            select(Model)
            .where(Model.created_by == user_id, Model.model_type == model_type)
            .order_by(sort.to_clause(Model, SORTABLE_FIELDS), Model.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def find_models_shared_with_user(
        self, user_id: str, model_type: int, sort: Sort
    ) -> list[ModelShareInfo]:
        """Share infos addressed to user_id, with their model loaded; sorted on the model."""
        stmt = (
            select(ModelShareInfo)
            .join(ModelShareInfo.model)
            .options(contains_eager(ModelShareInfo.model))
            .where(ModelShareInfo.user_id == user_id, Model.model_type == model_type)
            .order_by(sort.to_clause(Model, SORTABLE_FIELDS), ModelShareInfo.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().unique())


class ModelHistoryRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, history: ModelHistory) -> ModelHistory:
        self._session.add(history)
        await self._session.flush()
        return history

    async def find_by_created_by_and_model_type_and_removal_date_is_null(
        self, user_id: str, model_type: int
    ) -> list[ModelHistory]:
        stmt = select(ModelHistory).where(
            ModelHistory.created_by == user_id,
            ModelHistory.model_type == model_type,
            ModelHistory.removal_date.is_(None),
        ).order_by(ModelHistory.id)
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def find_models_shared_with_user(
        self, user_id: str, model_type: int, sort: Sort
    ) -> list[ModelHistory]:
        shared_model_ids = select(ModelShareInfo.model_id).where(ModelShareInfo.user_id == user_id)
        return await self._find_shared(shared_model_ids, model_type, sort)

    async def find_models_shared_with_user_or_groups(
        self, user_id: str, group_ids: list[str], model_type: int, sort: Sort
    ) -> list[ModelHistory]:
        shared_model_ids = select(ModelShareInfo.model_id).where(
            or_(
                ModelShareInfo.user_id == user_id,
                ModelShareInfo.group_id.in_(group_ids),
            )
        )
        return await self._find_shared(shared_model_ids, model_type, sort)

    async def _find_shared(self, shared_model_ids, model_type: int, sort: Sort) -> list[ModelHistory]:
        stmt = (
            select(ModelHistory)
            .where(
                ModelHistory.model_id.in_(shared_model_ids),
                ModelHistory.model_type == model_type,
                ModelHistory.removal_date.is_(None),
            )
            .order_by(sort.to_clause(ModelHistory, SORTABLE_FIELDS), ModelHistory.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars())
