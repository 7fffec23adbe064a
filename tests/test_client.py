"""
Drive SocialConnectClient against the app through TestClient, which speaks
the same ``request(method, url, ...)`` interface as requests.Session.
"""
import pytest

from socialconnect.client import ApiError, SocialConnectClient


@pytest.fixture
def api(client):
    return SocialConnectClient("http://testserver", session=client)


@pytest.fixture
def other_api(client):
    return SocialConnectClient("http://testserver", session=client)


def test_register_keeps_token(api):
    data = api.register("alice", "alice@x.com", "pw123456", "Alice", "Smith")
    assert api.token == data["token"]
    assert api.user["username"] == "alice"
    assert api.auth_headers()["Authorization"] == f"Bearer {data['token']}"
    assert api.profile()["email"] == "alice@x.com"


def test_logout_forgets_token(api):
    api.register("alice", "alice@x.com", "pw123456", "Alice", "Smith")
    api.logout()
    assert "Authorization" not in api.auth_headers()
    with pytest.raises(ApiError) as exc_info:
        api.profile()
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Access token required"


def test_login_failure_carries_server_message(api):
    with pytest.raises(ApiError) as exc_info:
        api.login("nobody@x.com", "pw123456")
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid email or password"


def test_posting_liking_and_commenting(api, other_api):
    api.register("alice", "alice@x.com", "pw123456", "Alice", "Smith")
    other_api.register("bob", "bob@x.com", "pw123456", "Bob", "Jones")

    post = api.create_post("Hello", "World", tags=["intro"])
    assert [p["id"] for p in other_api.list_posts()] == [post["id"]]
    assert other_api.list_posts(search="nothing-like-this") == []

    assert other_api.toggle_like(post["id"])["isLiked"] is True
    assert other_api.like_status(post["id"]) == {"isLiked": True, "likes": 1}

    comment = other_api.add_comment(post["id"], "Nice")
    assert [c["id"] for c in api.list_comments(post["id"])] == [comment["id"]]
    with pytest.raises(ApiError) as exc_info:
        api.delete_comment(comment["id"])
    assert exc_info.value.status_code == 403
    assert other_api.delete_comment(comment["id"]) == "Comment deleted successfully"

    assert api.get_post(post["id"])["comments"] == 0
    assert api.trending_tags() == [{"tag": "intro", "count": 1}]


def test_my_posts_round(api):
    api.register("alice", "alice@x.com", "pw123456", "Alice", "Smith")
    post = api.create_my_post("Mine", "Body")
    updated = api.update_my_post(post["id"], title="Renamed")
    assert updated["title"] == "Renamed"
    assert api.my_stats()["totalPosts"] == 1
    assert api.delete_my_post(post["id"]) == []
    assert api.my_posts() == []


def test_password_reset_through_client(api, mailer):
    api.register("alice", "alice@x.com", "pw123456", "Alice", "Smith")
    api.logout()
    generic = api.forgot_password("alice@x.com")
    assert generic == api.forgot_password("nobody@x.com")

    token = mailer.reset_emails[0]["token"]
    assert api.verify_reset_token(token)["email"] == "a***e@x.com"
    api.reset_password(token, "newpass99", "newpass99")
    assert api.login("alice@x.com", "newpass99")["user"]["username"] == "alice"


def test_health_and_stats(api):
    assert api.health()["status"] == "Server is running!"
    assert api.stats()["totalPosts"] == 0
