import pytest

from conftest import build_client
from constants import REQUEST_ID_HEADER
from exceptions import ConfigurationError
from main import load_templates


def create(client, title, body="Lorem ipsum"):
    response = client.post("/posts/new", json={"title": title, "body": body})
    assert response.status_code == 200, response.text
    return response.json()


def test_create_post_returns_full_row(client):
    post = create(client, "Second Post", "...")
    assert post == {"id": post["id"], "title": "Second Post", "slug": "second-post", "body": "..."}


def test_create_post_rejects_client_slug(client):
    response = client.post("/posts/new", json={"title": "T", "body": "b", "slug": "mine"})
    assert response.status_code == 422


def test_create_post_requires_title(client):
    response = client.post("/posts/new", json={"body": "b"})
    assert response.status_code == 422


def test_list_posts(client):
    create(client, "First post")
    create(client, "Second post")
    response = client.get("/posts")
    assert response.status_code == 200
    assert [p["slug"] for p in response.json()] == ["first-post", "second-post"]


def test_list_posts_newest_first_with_limit(client):
    create(client, "First post")
    newest = create(client, "Second post")
    response = client.get("/posts", params={"order": "-id", "limit": 1})
    assert response.json() == [newest]


def test_list_posts_rejects_unknown_order_column(client):
    response = client.get("/posts", params={"order": "-views"})
    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "validation_error"


def test_simplified_posts_have_only_title_and_body(client):
    create(client, "First post", "Lorem ipsum")
    response = client.get("/posts/simplified")
    assert response.json() == [{"title": "First post", "body": "Lorem ipsum"}]


def test_search_by_partial_slug(client):
    create(client, "First post")
    create(client, "Unrelated")
    response = client.get("/posts/search", params={"slug_like": "%-post%"})
    assert [p["slug"] for p in response.json()] == ["first-post"]


def test_update_keeps_slug(client):
    post = create(client, "Second post", "body stays")
    response = client.patch(f"/posts/{post['id']}", json={"title": "Second Post"})
    assert response.status_code == 200
    assert response.json() == {
        "id": post["id"], "title": "Second Post", "slug": "second-post", "body": "body stays",
    }


def test_update_unknown_post_is_404(client):
    response = client.patch("/posts/999", json={"title": "Nope"})
    assert response.status_code == 404
    assert response.json()["detail"]["error"] == "not_found"


@pytest.mark.parametrize("payload", [{}, {"slug": "hand-made"}, {"title": None}])
def test_update_rejects_bad_payload(client, payload):
    post = create(client, "First post")
    response = client.patch(f"/posts/{post['id']}", json=payload)
    assert response.status_code == 422


def test_delete_matching_then_again(client):
    create(client, "First post")
    create(client, "Second post")
    create(client, "Keeper")
    first = client.delete("/posts", params={"slug_like": "%-post%"})
    second = client.delete("/posts", params={"slug_like": "%-post%"})
    assert first.json() == {"deleted": 2}
    assert second.status_code == 200
    assert second.json() == {"deleted": 0}
    assert [p["slug"] for p in client.get("/posts").json()] == ["keeper"]


def test_show_post_renders_html(client):
    create(client, "First post", "Lorem ipsum")
    response = client.get("/post/first-post")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<h1>First post</h1>" in response.text
    assert "Lorem ipsum" in response.text


def test_show_post_escapes_html(client):
    create(client, "Tags", "<script>alert(1)</script>")
    response = client.get("/post/tags")
    assert "<script>" not in response.text
    assert "&lt;script&gt;" in response.text


def test_show_missing_post_is_404(client):
    response = client.get("/post/nonexistent")
    assert response.status_code == 404
    assert response.json()["detail"] == {
        "error": "not_found",
        "message": "Post 'nonexistent' not found",
        "details": {"resource": "Post", "key": "nonexistent"},
    }


def test_index_renders_all_posts_in_site_mode(client):
    create(client, "First post")
    create(client, "Second post")
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert 'href="/post/first-post"' in response.text
    assert 'href="/post/second-post"' in response.text


def test_index_without_posts(client):
    assert "No posts yet." in client.get("/").text


def test_index_is_healthcheck_in_api_mode(api_client):
    response = api_client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["mode"] == "api"
    assert body["posts"] == 0
    assert body["pool"]["checked_out"] >= 1


def test_health_in_site_mode(client):
    create(client, "First post")
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["mode"] == "site"
    assert body["posts"] == 1


def test_request_id_is_echoed(client):
    response = client.get("/posts", headers={REQUEST_ID_HEADER: "abc-123"})
    assert response.headers[REQUEST_ID_HEADER] == "abc-123"


def test_request_id_is_generated(client):
    assert client.get("/posts").headers[REQUEST_ID_HEADER]


def test_connections_are_returned_after_requests(client, pool):
    create(client, "First post")
    client.get("/post/nonexistent")
    client.patch("/posts/999", json={"title": "x"})
    assert pool.stats().checked_out == 0


def test_exhausted_pool_is_503(make_pool, database_url):
    pool = make_pool(pool_size=1, max_overflow=0, timeout=0.1)
    with build_client(pool, database_url) as client:
        with pool.acquire():
            response = client.get("/posts")
        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "pool_exhausted"
        # Once the connection is back the same client is served normally
        assert client.get("/posts").status_code == 200


def test_missing_templates_are_fatal(tmp_path):
    with pytest.raises(ConfigurationError):
        load_templates(tmp_path)


def test_broken_template_is_fatal(tmp_path):
    (tmp_path / "index.html").write_text("{% for post in posts %}")
    (tmp_path / "post.html").write_text("ok")
    with pytest.raises(ConfigurationError):
        load_templates(tmp_path)
