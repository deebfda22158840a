from conftest import API, auth, publish, user_id


def test_subscription_toggle_twice_returns_to_absent(client):
    ana = auth(client, "ana")
    bob = auth(client, "bob")
    bob_id = user_id(client, bob)

    first = client.post(f"{API}/subscriptions/c/{bob_id}", headers=ana)
    assert first.status_code == 200
    assert first.json()["message"] == "Channel subscribed."
    assert first.json()["data"] == {"active": True}

    channels = client.get(f"{API}/subscriptions/c", headers=ana).json()["data"]
    assert [c["username"] for c in channels] == ["bob"]
    subscribers = client.get(f"{API}/subscriptions/u/subscribers", headers=bob).json()["data"]
    assert [s["username"] for s in subscribers] == ["ana"]

    second = client.post(f"{API}/subscriptions/c/{bob_id}", headers=ana)
    assert second.status_code == 200
    assert second.json()["message"] == "Channel unsubscribed."

    res = client.get(f"{API}/subscriptions/c", headers=ana)
    assert res.status_code == 200
    assert res.json()["data"] == []


def test_cannot_subscribe_to_self(client):
    ana = auth(client, "ana")
    res = client.post(f"{API}/subscriptions/c/{user_id(client, ana)}", headers=ana)
    assert res.status_code == 400


def test_subscribe_to_missing_channel(client):
    ana = auth(client, "ana")
    res = client.post(f"{API}/subscriptions/c/00000000-0000-0000-0000-000000000000", headers=ana)
    assert res.status_code == 404
    bad = client.post(f"{API}/subscriptions/c/nope", headers=ana)
    assert bad.status_code == 400
    assert bad.json()["message"] == "Not a valid channel id."


def test_channel_profile_counts_and_is_subscribed(client):
    ana = auth(client, "ana")
    bob = auth(client, "bob")
    carl = auth(client, "carl")
    bob_id = user_id(client, bob)

    client.post(f"{API}/subscriptions/c/{bob_id}", headers=ana)
    client.post(f"{API}/subscriptions/c/{user_id(client, carl)}", headers=bob)

    seen_by_ana = client.get(f"{API}/users/c/bob", headers=ana).json()["data"]
    assert seen_by_ana["subscriberCount"] == 1
    assert seen_by_ana["channelsSubscribedToCount"] == 1
    assert seen_by_ana["isSubscribed"] is True

    seen_by_carl = client.get(f"{API}/users/c/bob", headers=carl).json()["data"]
    assert seen_by_carl["isSubscribed"] is False

    assert client.get(f"{API}/users/c/nobody", headers=ana).status_code == 404


def test_like_toggle_on_video(client):
    ana = auth(client, "ana")
    bob = auth(client, "bob")
    video = publish(client, bob)

    res = client.post(f"{API}/likes/toggle/v/{video['id']}", headers=ana)
    assert res.status_code == 200
    assert res.json()["message"] == "Video liked successfully."

    liked = client.get(f"{API}/likes/videos", headers=ana).json()["data"]
    assert len(liked) == 1
    assert liked[0]["id"] == video["id"]
    assert liked[0]["owner"]["username"] == "bob"

    res = client.post(f"{API}/likes/toggle/v/{video['id']}", headers=ana)
    assert res.json()["message"] == "Video like removed successfully."
    assert res.json()["data"] == {"active": False}
    assert client.get(f"{API}/likes/videos", headers=ana).status_code == 404


def test_like_comment_and_tweet(client):
    ana = auth(client, "ana")
    video = publish(client, ana)
    comment = client.post(f"{API}/comments/{video['id']}", json={"content": "hi"}, headers=ana).json()["data"]
    tweet = client.post(f"{API}/tweets/", json={"content": "news"}, headers=ana).json()["data"]

    res = client.post(f"{API}/likes/toggle/c/{comment['id']}", headers=ana)
    assert res.json()["message"] == "Comment liked successfully."
    res = client.post(f"{API}/likes/toggle/t/{tweet['id']}", headers=ana)
    assert res.json()["message"] == "Tweet liked successfully."

    # likes on comments and tweets are not liked videos
    assert client.get(f"{API}/likes/videos", headers=ana).status_code == 404


def test_like_missing_target(client):
    ana = auth(client, "ana")
    res = client.post(f"{API}/likes/toggle/t/00000000-0000-0000-0000-000000000000", headers=ana)
    assert res.status_code == 404
    assert res.json()["message"] == "No tweet found."


def test_dashboard_stats(client):
    ana = auth(client, "ana")
    bob = auth(client, "bob")
    first = publish(client, ana, title="one")
    second = publish(client, ana, title="two")
    publish(client, bob, title="not mine")

    client.get(f"{API}/videos/{first['id']}", headers=bob)
    client.get(f"{API}/videos/{first['id']}", headers=ana)
    client.get(f"{API}/videos/{second['id']}", headers=bob)
    client.post(f"{API}/likes/toggle/v/{first['id']}", headers=bob)
    client.post(f"{API}/likes/toggle/v/{second['id']}", headers=bob)
    client.post(f"{API}/likes/toggle/v/{second['id']}", headers=ana)
    client.post(f"{API}/subscriptions/c/{user_id(client, ana)}", headers=bob)

    stats = client.get(f"{API}/dashboard/stats", headers=ana).json()["data"]
    assert stats == {
        "totalVideos": 2,
        "totalViews": 3,
        "totalVideoLikes": 3,
        "subscribers": 1,
    }

    videos = client.get(f"{API}/dashboard/videos", headers=ana).json()["data"]
    assert sorted(v["title"] for v in videos) == ["one", "two"]


def test_dashboard_for_empty_channel(client):
    ana = auth(client, "ana")
    stats = client.get(f"{API}/dashboard/stats", headers=ana).json()["data"]
    assert stats == {"totalVideos": 0, "totalViews": 0, "totalVideoLikes": 0, "subscribers": 0}
    assert client.get(f"{API}/dashboard/videos", headers=ana).status_code == 404
