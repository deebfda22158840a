from conftest import API, PNG, auth, publish, user_id


def test_publish_uploads_both_assets(client, minio):
    headers = auth(client, "ana")
    video = publish(client, headers)

    assert video["title"] == "First video"
    assert video["views"] == 0
    assert video["isPublished"] is True
    assert video["videoFile"]["publicId"].startswith("videos/files/")
    assert video["thumbnail"]["publicId"].startswith("videos/thumbnails/")
    assert minio.has(video["videoFile"]["publicId"])
    assert minio.has(video["thumbnail"]["publicId"])


def test_publish_requires_files(client):
    headers = auth(client, "ana")
    res = client.post(
        f"{API}/videos/",
        data={"title": "t", "description": "d"},
        files={"thumbnail": ("thumb.png", PNG, "image/png")},
        headers=headers,
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Video file and thumbnail are required."


def test_get_video_counts_view_and_records_history(client):
    headers = auth(client, "ana")
    first = publish(client, headers, title="one")
    second = publish(client, headers, title="two")

    res = client.get(f"{API}/videos/{first['id']}", headers=headers)
    assert res.status_code == 200
    assert res.json()["data"]["views"] == 1
    assert res.json()["data"]["owner"]["username"] == "ana"

    client.get(f"{API}/videos/{second['id']}", headers=headers)
    client.get(f"{API}/videos/{first['id']}", headers=headers)

    history = client.get(f"{API}/users/history", headers=headers).json()["data"]
    assert [v["title"] for v in history] == ["one", "two"]
    assert history[0]["views"] == 2


def test_get_video_bad_id(client):
    headers = auth(client, "ana")
    res = client.get(f"{API}/videos/not-a-uuid", headers=headers)
    assert res.status_code == 400
    assert res.json()["message"] == "Not a valid video id."


def test_delete_then_get_is_not_found(client, minio):
    headers = auth(client, "ana")
    video = publish(client, headers)

    res = client.delete(f"{API}/videos/{video['id']}", headers=headers)
    assert res.status_code == 200
    assert res.json()["data"] == {}

    res = client.get(f"{API}/videos/{video['id']}", headers=headers)
    assert res.status_code == 404
    assert not minio.has(video["videoFile"]["publicId"])
    assert not minio.has(video["thumbnail"]["publicId"])


def test_delete_cascades_to_comments_likes_and_playlists(client):
    headers = auth(client, "ana")
    video = publish(client, headers)
    comment = client.post(f"{API}/comments/{video['id']}", json={"content": "nice"}, headers=headers).json()["data"]
    client.post(f"{API}/likes/toggle/v/{video['id']}", headers=headers)
    playlist = client.post(f"{API}/playlists/", json={"name": "p", "description": "d"}, headers=headers).json()["data"]
    client.patch(f"{API}/playlists/add/{video['id']}/{playlist['id']}", headers=headers)

    client.delete(f"{API}/videos/{video['id']}", headers=headers)

    assert client.get(f"{API}/likes/videos", headers=headers).status_code == 404
    assert client.patch(f"{API}/comments/c/{comment['id']}", json={"content": "x"}, headers=headers).status_code == 404
    detail = client.get(f"{API}/playlists/{playlist['id']}", headers=headers).json()["data"]
    assert detail["videos"] == []


def test_only_owner_can_mutate(client):
    ana = auth(client, "ana")
    bob = auth(client, "bob")
    video = publish(client, ana)

    update = client.patch(f"{API}/videos/{video['id']}", json={"title": "x", "description": "y"}, headers=bob)
    delete = client.delete(f"{API}/videos/{video['id']}", headers=bob)
    toggle = client.patch(f"{API}/videos/toggle/publish/{video['id']}", headers=bob)

    assert update.status_code == 401
    assert update.json()["message"] == "You cannot update this video."
    assert delete.status_code == 401
    assert toggle.status_code == 401
    assert client.get(f"{API}/videos/{video['id']}", headers=ana).status_code == 200


def test_missing_video_is_404_before_ownership(client):
    bob = auth(client, "bob")
    res = client.delete(f"{API}/videos/00000000-0000-0000-0000-000000000000", headers=bob)
    assert res.status_code == 404
    assert res.json()["message"] == "No video found."


def test_update_details(client):
    headers = auth(client, "ana")
    video = publish(client, headers)
    res = client.patch(
        f"{API}/videos/{video['id']}",
        json={"title": " New title ", "description": "New description"},
        headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["data"]["title"] == "New title"


def test_toggle_publish_hides_from_others(client):
    ana = auth(client, "ana")
    bob = auth(client, "bob")
    video = publish(client, ana)

    res = client.patch(f"{API}/videos/toggle/publish/{video['id']}", headers=ana)
    assert res.status_code == 200
    assert res.json()["data"]["isPublished"] is False
    assert res.json()["message"] == "Video unpublished."

    assert client.get(f"{API}/videos/{video['id']}", headers=bob).status_code == 404
    assert client.get(f"{API}/videos/", headers=bob).status_code == 404
    assert client.get(f"{API}/videos/{video['id']}", headers=ana).status_code == 200

    res = client.patch(f"{API}/videos/toggle/publish/{video['id']}", headers=ana)
    assert res.json()["message"] == "Video published."
    assert client.get(f"{API}/videos/{video['id']}", headers=bob).status_code == 200


def test_replace_thumbnail_removes_previous_asset(client, minio):
    headers = auth(client, "ana")
    video = publish(client, headers)
    old = video["thumbnail"]["publicId"]

    res = client.patch(
        f"{API}/videos/thumbnail/{video['id']}",
        files={"thumbnail": ("new.png", PNG, "image/png")},
        headers=headers,
    )
    assert res.status_code == 200
    new = res.json()["data"]["thumbnail"]["publicId"]
    assert new != old
    assert minio.has(new)
    assert not minio.has(old)


def test_list_paginates_sorts_and_searches(client):
    ana = auth(client, "ana")
    bob = auth(client, "bob")
    for title in ("alpha", "bravo", "charlie"):
        publish(client, ana, title=title)
    publish(client, bob, title="delta", description="cooking show")

    res = client.get(f"{API}/videos/", params={"sortBy": "title", "sortType": "asc", "limit": 2}, headers=ana)
    assert res.status_code == 200
    assert [v["title"] for v in res.json()["data"]] == ["alpha", "bravo"]

    res = client.get(
        f"{API}/videos/", params={"sortBy": "title", "sortType": "asc", "limit": 2, "page": 2}, headers=ana
    )
    assert [v["title"] for v in res.json()["data"]] == ["charlie", "delta"]

    res = client.get(f"{API}/videos/", params={"query": "COOKING"}, headers=ana)
    assert [v["title"] for v in res.json()["data"]] == ["delta"]
    assert res.json()["data"][0]["owner"]["username"] == "bob"

    res = client.get(f"{API}/videos/", params={"userId": user_id(client, bob)}, headers=ana)
    assert [v["title"] for v in res.json()["data"]] == ["delta"]


def test_list_rejects_unknown_sort(client):
    headers = auth(client, "ana")
    publish(client, headers)
    assert client.get(f"{API}/videos/", params={"sortBy": "password"}, headers=headers).status_code == 400
    assert client.get(f"{API}/videos/", params={"sortType": "sideways"}, headers=headers).status_code == 400


def test_empty_list_is_not_found(client):
    headers = auth(client, "ana")
    res = client.get(f"{API}/videos/", headers=headers)
    assert res.status_code == 404
