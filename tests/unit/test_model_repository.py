"""ModelRepository and ModelHistoryRepository against an in-memory SQLite database."""
from datetime import datetime, timezone

import pytest
import pytest_asyncio

from workflow_web.core.pagination import Sort
from workflow_web.models.base_models import Model, ModelHistory, ModelShareInfo
from workflow_web.repositories.model_repository import ModelHistoryRepository, ModelRepository

APP = Model.MODEL_TYPE_APP
BPMN = Model.MODEL_TYPE_BPMN


@pytest_asyncio.fixture
async def data(session):
    zeta = Model(name="zeta", created_by="alice", model_type=APP, version=2)
    alpha = Model(name="alpha", created_by="alice", model_type=APP, version=1)
    process = Model(name="process", created_by="alice", model_type=BPMN)
    bobs = Model(name="bobs-app", created_by="bob", model_type=APP, version=4)
    team = Model(name="team-app", created_by="bob", model_type=APP, version=1)
    session.add_all([zeta, alpha, process, bobs, team])
    await session.flush()

    session.add_all([
        ModelShareInfo(model_id=bobs.id, user_id="alice"),
        ModelShareInfo(model_id=team.id, group_id="sales"),
        ModelShareInfo(model_id=process.id, user_id="carol"),
        ModelHistory(model_id=zeta.id, name="zeta", created_by="alice", model_type=APP, version=1),
        ModelHistory(
            model_id=alpha.id, name="alpha", created_by="alice", model_type=APP, version=1,
            removal_date=datetime.now(timezone.utc),
        ),
        ModelHistory(model_id=bobs.id, name="bobs-app", created_by="bob", model_type=APP, version=3),
        ModelHistory(
            model_id=bobs.id, name="bobs-app", created_by="bob", model_type=APP, version=2,
            removal_date=datetime.now(timezone.utc),
        ),
        ModelHistory(model_id=team.id, name="team-app", created_by="bob", model_type=APP, version=1),
    ])
    await session.flush()
    return {"zeta": zeta, "alpha": alpha, "bobs": bobs, "team": team}


@pytest.mark.asyncio
async def test_models_created_by_sorted_and_filtered_by_type(session, data):
    models = await ModelRepository(session).find_models_created_by("alice", APP, Sort.asc("name"))

    assert [m.name for m in models] == ["alpha", "zeta"]


@pytest.mark.asyncio
async def test_models_shared_with_user_carry_their_model(session, data):
    shares = await ModelRepository(session).find_models_shared_with_user("alice", APP, Sort.asc("name"))

    assert len(shares) == 1
    assert shares[0].model.id == data["bobs"].id
    assert shares[0].model.name == "bobs-app"


@pytest.mark.asyncio
async def test_shared_with_user_filters_model_type(session, data):
    assert await ModelRepository(session).find_models_shared_with_user("carol", APP, Sort.asc("name")) == []


@pytest.mark.asyncio
async def test_model_get(session, data):
    repo = ModelRepository(session)

    assert (await repo.get(data["zeta"].id)).name == "zeta"
    assert await repo.get(999_999) is None


@pytest.mark.asyncio
async def test_history_created_by_excludes_removed(session, data):
    history = await ModelHistoryRepository(session).find_by_created_by_and_model_type_and_removal_date_is_null(
        "alice", APP
    )

    assert [(h.name, h.version) for h in history] == [("zeta", 1)]


@pytest.mark.asyncio
async def test_history_shared_with_user(session, data):
    history = await ModelHistoryRepository(session).find_models_shared_with_user("alice", APP, Sort.asc("name"))

    assert [(h.model_id, h.version) for h in history] == [(data["bobs"].id, 3)]


@pytest.mark.asyncio
async def test_history_shared_with_user_or_groups(session, data):
    history = await ModelHistoryRepository(session).find_models_shared_with_user_or_groups(
        "alice", ["sales"], APP, Sort.asc("name")
    )

    assert [h.name for h in history] == ["bobs-app", "team-app"]


@pytest.mark.asyncio
async def test_history_shared_with_unrelated_groups(session, data):
    history = await ModelHistoryRepository(session).find_models_shared_with_user_or_groups(
        "dave", ["hr"], APP, Sort.asc("name")
    )

    assert history == []
