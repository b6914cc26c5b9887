import pytest
import pytest_asyncio

from workflow_web.models.base_models import RelatedContent, Task, User


@pytest_asyncio.fixture
async def contents(seed):
    await seed(
        User(id="alice", email="alice@example.com"),
        User(id="bob", email="bob@example.com"),
        User(id="mallory", email="mallory@example.com"),
        Task(id="task-1", name="Review", assignee_id="alice", process_instance_id="p-1"),
    )
    await seed(*[
        RelatedContent(name=f"attachment-{i}", task_id="task-1", process_instance_id="p-1",
                       related_content=True, content_size=100, created_by="alice")
        for i in range(3)
    ])
    await seed(
        RelatedContent(name="scan.pdf", task_id="task-1", process_instance_id="p-1", related_content=False,
                       field="scan", content_size=50, created_by="alice", mime_type="application/pdf"),
        RelatedContent(name="link", process_instance_id="p-2", related_content=True, link=True,
                       link_url="https://example.com/doc", source="alfresco", source_id="doc-7",
                       created_by="bob"),
    )


@pytest.mark.asyncio
async def test_task_content_is_paged(ac, contents, auth_headers):
    first = await ac.get("/rest/tasks/task-1/content", params={"size": 2}, headers=auth_headers("alice"))
    second = await ac.get(
        "/rest/tasks/task-1/content", params={"size": 2, "page": 1}, headers=auth_headers("alice")
    )

    assert first.status_code == 200
    assert first.json()["total"] == 3
    assert first.json()["size"] == 2
    assert second.json()["start"] == 2
    assert [c["name"] for c in second.json()["data"]] == ["attachment-2"]


@pytest.mark.asyncio
async def test_task_field_content(ac, contents, auth_headers):
    resp = await ac.get("/rest/tasks/task-1/field-content", params={"field": "scan"}, headers=auth_headers("alice"))

    assert resp.status_code == 200
    [item] = resp.json()["data"]
    assert item["name"] == "scan.pdf"
    assert item["mimeType"] == "application/pdf"
    assert item["field"] == "scan"


@pytest.mark.asyncio
async def test_task_content_requires_task_access(ac, contents, auth_headers):
    resp = await ac.get("/rest/tasks/task-1/content", headers=auth_headers("bob"))

    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_process_instance_content(ac, contents, auth_headers):
    headers = auth_headers("alice")

    related = await ac.get("/rest/process-instances/p-1/content", headers=headers)
    field = await ac.get("/rest/process-instances/p-1/field-content", headers=headers)
    one_field = await ac.get("/rest/process-instances/p-1/content", params={"field": "scan"}, headers=headers)
    everything = await ac.get("/rest/process-instances/p-1/all-content", headers=headers)

    assert related.json()["total"] == 3
    assert field.json()["total"] == 1
    assert [c["name"] for c in one_field.json()["data"]] == ["scan.pdf"]
    assert everything.json()["total"] == 4


@pytest.mark.asyncio
async def test_source_content(ac, contents, auth_headers):
    resp = await ac.get(
        "/rest/content", params={"source": "alfresco", "sourceId": "doc-7"}, headers=auth_headers("bob")
    )

    [item] = resp.json()["data"]
    assert item["link"] is True
    assert item["linkUrl"] == "https://example.com/doc"


@pytest.mark.asyncio
async def test_delete_process_instance_content(ac, contents, auth_headers):
    resp = await ac.delete("/rest/process-instances/p-1/content", headers=auth_headers("alice"))

    assert resp.status_code == 200
    assert resp.json() == {"deleted": 4}
    after = await ac.get("/rest/process-instances/p-1/all-content", headers=auth_headers("alice"))
    assert after.json()["total"] == 0


@pytest.mark.asyncio
async def test_content_usage(ac, contents, auth_headers):
    alice = await ac.get("/rest/content/usage", headers=auth_headers("alice"))
    bob = await ac.get("/rest/content/usage", headers=auth_headers("bob"))

    assert alice.json() == {"userId": "alice", "totalContentSize": 350}
    assert bob.json() == {"userId": "bob", "totalContentSize": 0}


@pytest.mark.asyncio
async def test_process_instance_content_requires_access(ac, contents, auth_headers):
    headers = auth_headers("mallory")

    listings = [
        await ac.get("/rest/process-instances/p-1/content", headers=headers),
        await ac.get("/rest/process-instances/p-1/field-content", headers=headers),
        await ac.get("/rest/process-instances/p-1/all-content", headers=headers),
    ]
    delete = await ac.delete("/rest/process-instances/p-1/content", headers=headers)

    assert [r.status_code for r in listings] == [403] * 3
    assert delete.status_code == 403
    assert delete.json()["detail"]["code"] == "NOT_PERMITTED"
    remaining = await ac.get("/rest/process-instances/p-1/all-content", headers=auth_headers("alice"))
    assert remaining.json()["total"] == 4


@pytest.mark.asyncio
async def test_content_creator_can_manage_process_instance_content(ac, contents, auth_headers):
    # p-2 has no tasks; bob created its only attachment
    listing = await ac.get("/rest/process-instances/p-2/all-content", headers=auth_headers("bob"))
    denied = await ac.get("/rest/process-instances/p-2/all-content", headers=auth_headers("alice"))
    delete = await ac.delete("/rest/process-instances/p-2/content", headers=auth_headers("bob"))

    assert listing.json()["total"] == 1
    assert denied.status_code == 403
    assert delete.json() == {"deleted": 1}
