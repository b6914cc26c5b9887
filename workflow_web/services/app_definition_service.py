"""App Definition Service: projects APP models and their history into app definitions."""
from __future__ import annotations

import structlog
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from workflow_web.core.errors import InternalServerError
from workflow_web.core.pagination import Sort
from workflow_web.models.app_definition import AppDefinition
from workflow_web.models.base_models import Model, ModelHistory, User
from workflow_web.repositories.model_repository import ModelHistoryRepository, ModelRepository
from workflow_web.services.representations import AppDefinitionServiceRepresentation

logger = structlog.get_logger()


class AppDefinitionService:
    def __init__(
        self,
        session: AsyncSession | None = None,
        *,
        model_repository: ModelRepository | None = None,
        model_history_repository: ModelHistoryRepository | None = None,
    ):
        self._models = model_repository or ModelRepository(session)
        self._history = model_history_repository or ModelHistoryRepository(session)

    async def get_app_definitions(self, user: User) -> list[AppDefinitionServiceRepresentation]:
        """App definitions the user created or that were shared with the user directly.

        A model found in both collections is taken from the created-by collection.
        """
        model_map: dict[int, Model] = {}

        created_by = await self._models.find_models_created_by(
            user.id, Model.MODEL_TYPE_APP, Sort.asc("name")
        )
        for model in created_by:
            model_map.setdefault(model.id, model)

        shared_with = await self._models.find_models_shared_with_user(
            user.id, Model.MODEL_TYPE_APP, Sort.asc("name")
        )
        for info in shared_with:
            model_map.setdefault(info.model.id, info.model)

        return [self.create_app_definition(model) for model in model_map.values()]

    async def get_deployable_app_definitions(self, user: User) -> list[AppDefinitionServiceRepresentation]:
        """Gathers all 'deployable' app definitions for the user.

        - All non-removed historical app models created by the user are fetched;
          only the highest version of each app model is retained.
        - All historical app models shared with the user, or with the groups the
          user is part of, are fetched; again only the highest version is retained.

        Snapshots of models that no longer exist are skipped.
        """
        model_map: dict[int, ModelHistory] = {}

        created_by = await self._history.find_by_created_by_and_model_type_and_removal_date_is_null(
            user.id, Model.MODEL_TYPE_APP
        )
        _retain_highest_versions(model_map, created_by)

        group_ids = user.group_ids
        if group_ids:
            shared = await self._history.find_models_shared_with_user_or_groups(
                user.id, group_ids, Model.MODEL_TYPE_APP, Sort.asc("name")
            )
        else:
            shared = await self._history.find_models_shared_with_user(
                user.id, Model.MODEL_TYPE_APP, Sort.asc("name")
            )
        _retain_highest_versions(model_map, shared)

        result = []
        for history in model_map.values():
            latest_model = await self._models.get(history.model_id)
            if latest_model is not None:
                result.append(self.create_app_definition(history))
        return result

    def create_app_definition(self, model: Model | ModelHistory) -> AppDefinitionServiceRepresentation:
        representation = AppDefinitionServiceRepresentation(
            id=model.model_id if isinstance(model, ModelHistory) else model.id,
            name=model.name,
            description=model.description,
            version=model.version,
            definition=model.model_editor_json,
        )

        try:
            app_definition = AppDefinition.model_validate_json(model.model_editor_json)
        except (ValidationError, TypeError):
            logger.exception("app_definition_deserialization_failed", model_id=model.id)
            raise InternalServerError("Could not deserialize app definition")

        representation.theme = app_definition.theme
        representation.icon = app_definition.icon
        if app_definition.models:
            representation.models = [model_def.id for model_def in app_definition.models]
        return representation


def _retain_highest_versions(model_map: dict[int, ModelHistory], histories: list[ModelHistory]) -> None:
    """Keep, per model id, the first snapshot seen unless a later one has a strictly greater version."""
    for history in histories:
        current = model_map.get(history.model_id)
        if current is None or history.version > current.version:
            model_map[history.model_id] = history
