import uuid

import pytest
from sqlalchemy import func, select

from conftest import fetch
from vita_admin.models.banner import Banner
from vita_admin.models.user import Mentor, User


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, path, kwargs",
    [
        ("POST", "/api/admin/mentor/approve", {"json": {"id": str(uuid.uuid4())}}),
        ("GET", "/api/admin/mentor/reject", {"params": {"id": str(uuid.uuid4())}}),
        ("DELETE", "/api/admin/user/" + str(uuid.uuid4()), {}),
        ("POST", "/api/admin/mentor/top", {"json": {"id": str(uuid.uuid4())}}),
        ("PUT", "/api/admin/banner", {"json": {"title": "Hello"}}),
    ],
)
async def test_moderation_requires_admin_session(client, method, path, kwargs):
    response = await client.request(method, path, **kwargs)

    assert response.status_code == 401
    assert response.json() == {"error": "Not authorized"}


@pytest.mark.asyncio
async def test_approve_mentor(admin_client, notifier, mentor, session_factory):
    response = await admin_client.post("/api/admin/mentor/approve", json={"id": str(mentor.id)})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Mentor approved!"}
    assert (await fetch(session_factory, Mentor, mentor.id)).approved is True
    assert notifier.last["to"] == mentor.email
    assert notifier.last["template"] == "accept_mentor.html"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{}, {"id": None}, {"id": "not-an-id"}, {"id": 123}, {"id": ["x"]}, {"id": str(uuid.uuid4())}],
)
async def test_approve_unknown_mentor(admin_client, notifier, payload):
    response = await admin_client.post("/api/admin/mentor/approve", json=payload)

    assert response.status_code == 401
    assert response.json() == {"error": "Mentor Not Found"}
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_approval_survives_email_failure(admin_client, notifier, mentor, session_factory):
    notifier.fail = True

    response = await admin_client.post("/api/admin/mentor/approve", json={"id": str(mentor.id)})

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Email could not be sent",
        "message": "Mentor approved!",
    }
    assert (await fetch(session_factory, Mentor, mentor.id)).approved is True


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "DELETE"])
async def test_reject_mentor_removes_user_and_profile(admin_client, notifier, mentor_user, session_factory, method):
    response = await admin_client.request(method, "/api/admin/mentor/reject", params={"id": str(mentor_user.id)})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Mentor rejected successfully!"}
    assert await fetch(session_factory, User, mentor_user.id) is None
    assert await fetch(session_factory, Mentor, mentor_user.mentor_information) is None
    assert notifier.last["template"] == "reject_mentor.html"


@pytest.mark.asyncio
async def test_rejection_survives_email_failure(admin_client, notifier, mentor_user, session_factory):
    notifier.fail = True

    response = await admin_client.delete("/api/admin/mentor/reject", params={"id": str(mentor_user.id)})

    assert response.status_code == 500
    assert response.json()["error"] == "Email could not be sent"
    assert await fetch(session_factory, User, mentor_user.id) is None
    assert await fetch(session_factory, Mentor, mentor_user.mentor_information) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"id": "zzz"}, {"id": str(uuid.uuid4())}])
async def test_reject_unknown_user(admin_client, notifier, params):
    response = await admin_client.get("/api/admin/mentor/reject", params=params)

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_delete_user_removes_user_and_profile(admin_client, notifier, mentor_user, session_factory):
    response = await admin_client.delete(f"/api/admin/user/{mentor_user.id}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "User deleted successfully!"}
    assert await fetch(session_factory, User, mentor_user.id) is None
    assert await fetch(session_factory, Mentor, mentor_user.mentor_information) is None
    assert notifier.last["template"] == "account_deleted.html"
    assert notifier.last["context"]["email"] == mentor_user.email


@pytest.mark.asyncio
async def test_delete_user_without_mentor_profile(admin_client, db, session_factory):
    user = User(name="Plain User", email="plain@example.com")
    db.add(user)
    await db.commit()

    response = await admin_client.delete(f"/api/admin/user/{user.id}")

    assert response.status_code == 200
    assert await fetch(session_factory, User, user.id) is None


@pytest.mark.asyncio
async def test_deletion_survives_email_failure(admin_client, notifier, mentor_user, session_factory):
    notifier.fail = True

    response = await admin_client.delete(f"/api/admin/user/{mentor_user.id}")

    assert response.status_code == 500
    assert response.json()["message"] == "User deleted successfully!"
    assert await fetch(session_factory, User, mentor_user.id) is None
    assert await fetch(session_factory, Mentor, mentor_user.mentor_information) is None


@pytest.mark.asyncio
async def test_delete_unknown_user(admin_client):
    response = await admin_client.delete("/api/admin/user/not-a-uuid")

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


@pytest.mark.asyncio
async def test_top_mentor_toggle_is_its_own_inverse(admin_client, notifier, mentor, session_factory):
    original = mentor.top_mentor

    response = await admin_client.post("/api/admin/mentor/top", json={"id": str(mentor.id)})
    assert response.status_code == 200
    assert (await fetch(session_factory, Mentor, mentor.id)).top_mentor is (not original)
    assert notifier.last["context"]["top_mentor"] is (not original)

    response = await admin_client.post("/api/admin/mentor/top", json={"id": str(mentor.id)})
    assert response.status_code == 200
    assert (await fetch(session_factory, Mentor, mentor.id)).top_mentor is original


@pytest.mark.asyncio
async def test_top_mentor_toggle_survives_email_failure(admin_client, notifier, mentor, session_factory):
    notifier.fail = True

    response = await admin_client.post("/api/admin/mentor/top", json={"id": str(mentor.id)})

    assert response.status_code == 500
    assert (await fetch(session_factory, Mentor, mentor.id)).top_mentor is True


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"id": "12345"}, {"id": 12345}, {}])
async def test_top_mentor_unknown_id(admin_client, notifier, payload):
    response = await admin_client.post("/api/admin/mentor/top", json=payload)

    assert response.status_code == 401
    assert response.json() == {"error": "Mentor Not Found"}
    assert notifier.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/admin/mentor/approve", "/api/admin/mentor/top"])
async def test_mentor_endpoints_without_body(admin_client, notifier, path):
    response = await admin_client.post(path)

    assert response.status_code == 401
    assert response.json() == {"error": "Mentor Not Found"}
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_latest_banner_wins(admin_client, session_factory):
    first = await admin_client.put("/api/admin/banner", json={"title": "Spring cohort", "image_link": "a.png"})
    second = await admin_client.put(
        "/api/admin/banner",
        json={"title": "Summer cohort", "description": "Apply now", "redirect_link": "/apply"},
    )

    assert first.status_code == second.status_code == 200
    assert second.json()["success"] is True
    assert second.json()["banner"]["title"] == "Summer cohort"

    async with session_factory() as session:
        count = (await session.execute(select(func.count()).select_from(Banner))).scalar_one()
        banner = (await session.execute(select(Banner))).scalar_one()
    assert count == 1
    assert banner.title == "Summer cohort"
    assert banner.description == "Apply now"
    assert banner.image_link is None
    assert str(banner.id) == second.json()["banner"]["id"]
