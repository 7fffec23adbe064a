"""
Python client for the Social Connect REST API.

Mirrors what the web frontend does: keep the bearer token returned by
register/login and send it on every call that needs it.

    client = SocialConnectClient("http://localhost:8000")
    client.login("alice@example.com", "pw123456")
    post = client.create_post("Hello", "World", tags=["intro"])
    client.toggle_like(post["id"])
"""
import logging
from typing import List, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class SocialConnectClient:
    def __init__(self, base_url: str, session=None, timeout: float = 10.0, token: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        # Anything with a requests-style ``request`` method works here
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token = token
        self.user = None

    # ----------------- PLUMBING -----------------
    def auth_headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, json=None, params=None):
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            params=params,
            headers=self.auth_headers(),
            timeout=self.timeout,
        )
        try:
            data = response.json()
        except ValueError:
            data = None
        if response.status_code >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            logger.debug("%s %s failed with %s", method, path, response.status_code)
            raise ApiError(response.status_code, message or f"Request failed with status {response.status_code}")
        return data

    def _remember(self, data: dict) -> dict:
        self.token = data["token"]
        self.user = data["user"]
        return data

    # ----------------- AUTH -----------------
    def register(self, username: str, email: str, password: str, first_name: str, last_name: str) -> dict:
        data = self._request("POST", "/api/auth/register", json={
            "username": username,
            "email": email,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
        })
        return self._remember(data)

    def login(self, email: str, password: str) -> dict:
        return self._remember(self._request("POST", "/api/auth/login", json={"email": email, "password": password}))

    def logout(self) -> None:
        # Tokens are stateless; forgetting it is all there is
        self.token = None
        self.user = None

    def profile(self) -> dict:
        return self._request("GET", "/api/auth/profile")["user"]

    def forgot_password(self, email: str) -> str:
        return self._request("POST", "/api/auth/forgot-password", json={"email": email})["message"]

    def verify_reset_token(self, token: str) -> dict:
        return self._request("GET", f"/api/auth/verify-reset-token/{token}")

    def reset_password(self, token: str, password: str, confirm_password: str) -> str:
        data = self._request("POST", f"/api/auth/reset-password/{token}", json={
            "password": password,
            "confirmPassword": confirm_password,
        })
        return data["message"]

    # ----------------- POSTS -----------------
    def list_posts(self, search: Optional[str] = None, filter: Optional[str] = None,
                   page: Optional[int] = None, limit: Optional[int] = None) -> List[dict]:
        params = {k: v for k, v in {"search": search, "filter": filter, "page": page, "limit": limit}.items()
                  if v is not None}
        return self._request("GET", "/api/posts", params=params)

    def get_post(self, post_id: str) -> dict:
        return self._request("GET", f"/api/posts/{post_id}")

    def create_post(self, title: str, content: str, image: Optional[str] = None,
                    tags: Optional[List[str]] = None) -> dict:
        return self._request("POST", "/api/posts", json={
            "title": title, "content": content, "image": image, "tags": tags or [],
        })

    def toggle_like(self, post_id: str) -> dict:
        return self._request("POST", f"/api/posts/{post_id}/toggle-like")

    def like_status(self, post_id: str) -> dict:
        return self._request("GET", f"/api/posts/{post_id}/like-status")

    def trending_tags(self) -> List[dict]:
        return self._request("GET", "/api/posts/trending/tags")

    # ----------------- COMMENTS -----------------
    def list_comments(self, post_id: str) -> List[dict]:
        return self._request("GET", f"/api/posts/{post_id}/comments")

    def add_comment(self, post_id: str, content: str) -> dict:
        return self._request("POST", f"/api/posts/{post_id}/comments", json={"content": content})

    def delete_comment(self, comment_id: str) -> str:
        return self._request("DELETE", f"/api/posts/comments/{comment_id}")["message"]

    # ----------------- MY POSTS -----------------
    def my_posts(self) -> List[dict]:
        return self._request("GET", "/api/my-posts")

    def create_my_post(self, title: str, content: str, image: Optional[str] = None,
                       tags: Optional[List[str]] = None) -> dict:
        return self._request("POST", "/api/my-posts", json={
            "title": title, "content": content, "image": image, "tags": tags or [],
        })

    def update_my_post(self, post_id: str, **fields) -> dict:
        return self._request("PUT", f"/api/my-posts/{post_id}", json=fields)

    def delete_my_post(self, post_id: str) -> List[dict]:
        return self._request("DELETE", f"/api/my-posts/{post_id}")

    def my_stats(self) -> dict:
        return self._request("GET", "/api/my-posts/stats")

    # ----------------- MISC -----------------
    def stats(self) -> dict:
        return self._request("GET", "/api/stats")

    def health(self) -> dict:
        return self._request("GET", "/health")
