from bson.objectid import ObjectId


def test_like_scenario_between_two_users(client):
    # A registers, logs in and posts
    resp = client.post("/api/auth/register", json={
        "username": "alice", "email": "alice@x.com", "password": "pw123456",
        "firstName": "Alice", "lastName": "Smith",
    })
    assert resp.status_code == 201
    login = client.post("/api/auth/login", json={"email": "alice@x.com", "password": "pw123456"})
    alice_headers = {"Authorization": f"Bearer {login.json()['token']}"}
    created = client.post("/api/posts", json={"title": "Hello", "content": "World"}, headers=alice_headers)
    assert created.status_code == 201

    # B sees exactly one untouched post
    bob = client.post("/api/auth/register", json={
        "username": "bob", "email": "bob@x.com", "password": "pw123456",
        "firstName": "Bob", "lastName": "Jones",
    }).json()
    bob_headers = {"Authorization": f"Bearer {bob['token']}"}
    listed = client.get("/api/posts").json()
    assert len(listed) == 1
    assert listed[0]["likes"] == 0
    assert listed[0]["comments"] == 0
    post_id = listed[0]["id"]

    first = client.post(f"/api/posts/{post_id}/toggle-like", headers=bob_headers)
    assert first.status_code == 200
    assert first.json() == {"message": "Post liked!", "likes": 1, "isLiked": True}

    second = client.post(f"/api/posts/{post_id}/toggle-like", headers=bob_headers)
    assert second.json() == {"message": "Post unliked!", "likes": 0, "isLiked": False}


def test_create_post_ignores_client_authorship(client, register):
    user, headers = register("alice", firstName="Alice", lastName="Smith")
    resp = client.post("/api/posts", json={
        "title": "Hello",
        "content": "World",
        "author": "Mallory",
        "authorId": "64b7f0c2a1b2c3d4e5f60718",
        "tags": ["intro"],
    }, headers=headers)
    body = resp.json()
    assert resp.status_code == 201
    assert body["author"] == "Alice Smith"
    assert body["authorId"] == user["id"]
    assert body["authorUsername"] == "alice"
    assert body["tags"] == ["intro"]


def test_create_post_requires_auth(client):
    resp = client.post("/api/posts", json={"title": "Hello", "content": "World"})
    assert resp.status_code == 401


def test_create_post_validation(client, register):
    _, headers = register()
    missing = client.post("/api/posts", json={"content": "World"}, headers=headers)
    assert missing.status_code == 400
    assert missing.json() == {"error": "Title is required"}

    too_long = client.post("/api/posts", json={"title": "t" * 201, "content": "World"}, headers=headers)
    assert too_long.status_code == 400


def test_malformed_body_is_400(client, register):
    _, headers = register()
    resp = client.post("/api/posts", json={"title": "Hello", "content": "World", "tags": "nope"}, headers=headers)
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_get_post_includes_comments(client, register, make_post):
    _, headers = register()
    post = make_post(headers)
    client.post(f"/api/posts/{post['id']}/comments", json={"content": "First!"}, headers=headers)

    resp = client.get(f"/api/posts/{post['id']}")
    body = resp.json()
    assert resp.status_code == 200
    assert body["title"] == "Hello"
    assert body["comments"] == 1
    assert [c["content"] for c in body["commentsData"]] == ["First!"]


def test_get_missing_post(client):
    assert client.get("/api/posts/64b7f0c2a1b2c3d4e5f60718").status_code == 404
    resp = client.get("/api/posts/not-an-id")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Post not found"}


def test_list_posts_query_parameters(client, register, make_post, db):
    _, headers = register()
    make_post(headers, title="Python tips", content="Use pathlib")
    popular = make_post(headers, title="Popular", content="Loved")
    db.posts.update_one({"_id": ObjectId(popular["id"])}, {"$set": {"likes": 11}})

    assert [p["title"] for p in client.get("/api/posts", params={"search": "pathlib"}).json()] == ["Python tips"]
    assert [p["title"] for p in client.get("/api/posts", params={"filter": "popular"}).json()] == ["Popular"]
    assert len(client.get("/api/posts", params={"limit": 1}).json()) == 1
    assert client.get("/api/posts", params={"limit": "lots"}).status_code == 400


def test_like_status(client, register, make_post):
    _, alice_headers = register()
    _, bob_headers = register()
    post = make_post(alice_headers)

    resp = client.get(f"/api/posts/{post['id']}/like-status", headers=bob_headers)
    assert resp.json() == {"isLiked": False, "likes": 0}
    client.post(f"/api/posts/{post['id']}/toggle-like", headers=bob_headers)
    resp = client.get(f"/api/posts/{post['id']}/like-status", headers=bob_headers)
    assert resp.json() == {"isLiked": True, "likes": 1}
    resp = client.get(f"/api/posts/{post['id']}/like-status", headers=alice_headers)
    assert resp.json() == {"isLiked": False, "likes": 1}


def test_toggle_like_on_missing_post(client, register):
    _, headers = register()
    resp = client.post("/api/posts/64b7f0c2a1b2c3d4e5f60718/toggle-like", headers=headers)
    assert resp.status_code == 404


def test_comment_lifecycle(client, register, make_post):
    _, alice_headers = register()
    _, bob_headers = register()
    post = make_post(alice_headers)

    created = client.post(f"/api/posts/{post['id']}/comments", json={"content": "  Nice  "}, headers=bob_headers)
    assert created.status_code == 201
    comment = created.json()
    assert comment["content"] == "Nice"
    assert comment["postId"] == post["id"]

    listed = client.get(f"/api/posts/{post['id']}/comments").json()
    assert [c["id"] for c in listed] == [comment["id"]]

    # Only the comment's author may delete it
    forbidden = client.delete(f"/api/posts/comments/{comment['id']}", headers=alice_headers)
    assert forbidden.status_code == 403
    assert forbidden.json() == {"error": "You can only delete your own comments"}

    deleted = client.delete(f"/api/posts/comments/{comment['id']}", headers=bob_headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/posts/{post['id']}").json()["comments"] == 0

    missing = client.delete(f"/api/posts/comments/{comment['id']}", headers=bob_headers)
    assert missing.status_code == 404


def test_comment_validation_and_missing_post(client, register, make_post):
    _, headers = register()
    post = make_post(headers)
    empty = client.post(f"/api/posts/{post['id']}/comments", json={"content": "   "}, headers=headers)
    assert empty.status_code == 400
    assert empty.json() == {"error": "Comment content is required"}

    missing = client.post("/api/posts/64b7f0c2a1b2c3d4e5f60718/comments", json={"content": "Hi"}, headers=headers)
    assert missing.status_code == 404


def test_comments_for_unknown_post_is_empty_list(client):
    assert client.get("/api/posts/not-an-id/comments").json() == []


def test_trending_tags(client, register, make_post):
    _, headers = register()
    make_post(headers, tags=["python", "fastapi"])
    make_post(headers, tags=["python"])
    resp = client.get("/api/posts/trending/tags")
    assert resp.status_code == 200
    assert resp.json()[0] == {"tag": "python", "count": 2}


def test_home_and_stats(client, register, make_post):
    _, headers = register()
    make_post(headers)
    index = client.get("/api")
    assert index.status_code == 200
    assert index.json()["endpoints"]["posts"] == "/api/posts"

    stats = client.get("/api/stats").json()
    assert stats["totalPosts"] == 1
    assert stats["totalUsers"] == 1
    assert stats["appStatus"] == "Active"
    assert set(stats) == {
        "totalPosts", "totalUsers", "totalLikes", "totalComments", "totalInteractions", "appStatus",
    }


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "Server is running!"
    assert "timestamp" in resp.json()


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert "error" in resp.json()
