"""Studies, posts and forum topics share the owned-content contract."""

import pytest

from .conftest import API


RESOURCES = [
    ("studies", {"title": "Romans", "content": "Study text", "category": "epistles"}, "Study"),
    ("posts", {"title": "Welcome", "content": "Hello church"}, "Post"),
    ("forum/topics", {"title": "Prayer", "content": "Requests", "category": "prayer"}, "Forum topic"),
]


@pytest.mark.parametrize("path,body,label", RESOURCES)
def test_crud_and_ownership(client, admin, member, other_member, path, body, label):
    owner, owner_headers = member
    _, other_headers = other_member
    _, admin_headers = admin

    assert client.post(f"{API}/{path}", json=body).status_code == 401

    created = client.post(f"{API}/{path}", json=body, headers=owner_headers)
    assert created.status_code == 201
    record = created.json()
    assert record["authorId"] == owner["id"]
    assert "createdAt" in record

    assert client.get(f"{API}/{path}").json() == [record]
    assert client.get(f"{API}/{path}/{record['id']}").json() == record

    forbidden = client.patch(f"{API}/{path}/{record['id']}", json={"title": "Hijacked"}, headers=other_headers)
    assert forbidden.status_code == 403

    updated = client.patch(f"{API}/{path}/{record['id']}", json={"title": "Edited"}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["title"] == "Edited"
    assert updated.json()["content"] == body["content"]

    assert client.delete(f"{API}/{path}/{record['id']}", headers=other_headers).status_code == 403
    deleted = client.delete(f"{API}/{path}/{record['id']}", headers=owner_headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"message": f"{label} deleted"}

    missing = client.get(f"{API}/{path}/{record['id']}")
    assert missing.status_code == 404
    assert missing.json() == {"message": f"{label} not found"}


@pytest.mark.parametrize("path,label", [("studies", "study"), ("posts", "post"), ("forum/topics", "forum topic")])
def test_create_validation_message(client, member, path, label):
    _, headers = member
    response = client.post(f"{API}/{path}", json={}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == f"Invalid {label} data"
    assert response.json()["errors"]


def test_post_publish_flag_defaults_and_toggles(client, member):
    _, headers = member
    post = client.post(f"{API}/posts", json={"title": "Draft", "content": "..."}, headers=headers).json()
    assert post["isPublished"] is True

    hidden = client.patch(f"{API}/posts/{post['id']}", json={"isPublished": False}, headers=headers)
    assert hidden.json()["isPublished"] is False
    shown = client.patch(f"{API}/posts/{post['id']}", json={"isPublished": True}, headers=headers)
    assert shown.json()["isPublished"] is True


def test_patch_with_wrong_type_is_rejected(client, member):
    _, headers = member
    post = client.post(f"{API}/posts", json={"title": "Draft", "content": "..."}, headers=headers).json()
    response = client.patch(f"{API}/posts/{post['id']}", json={"isPublished": "maybe"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid post data"


def test_replies_flow(client, member, other_member):
    _, owner_headers = member
    replier, replier_headers = other_member
    topic = client.post(
        f"{API}/forum/topics",
        json={"title": "Prayer", "content": "Requests", "category": "prayer"},
        headers=owner_headers,
    ).json()

    first = client.post(
        f"{API}/forum/replies", json={"content": "Praying", "topicId": topic["id"]}, headers=replier_headers
    )
    assert first.status_code == 201
    assert first.json()["authorId"] == replier["id"]
    second = client.post(
        f"{API}/forum/replies", json={"content": "Amen", "topicId": topic["id"]}, headers=owner_headers
    ).json()

    replies = client.get(f"{API}/forum/topics/{topic['id']}/replies").json()
    assert [r["id"] for r in replies] == [first.json()["id"], second["id"]]
    assert client.get(f"{API}/forum/topics/999/replies").json() == []

    # Only the reply's author (or an admin) may change it, even on one's own topic.
    reply_id = first.json()["id"]
    assert client.patch(f"{API}/forum/replies/{reply_id}", json={"content": "x"}, headers=owner_headers).status_code == 403
    edited = client.patch(f"{API}/forum/replies/{reply_id}", json={"content": "Still praying"}, headers=replier_headers)
    assert edited.status_code == 200
    assert edited.json()["content"] == "Still praying"
    assert edited.json()["topicId"] == topic["id"]

    assert client.delete(f"{API}/forum/replies/{reply_id}", headers=replier_headers).json() == {
        "message": "Forum reply deleted"
    }
    assert client.delete(f"{API}/forum/replies/{reply_id}", headers=replier_headers).status_code == 404


def test_reply_requires_topic_id(client, member):
    _, headers = member
    response = client.post(f"{API}/forum/replies", json={"content": "orphan"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid forum reply data"
