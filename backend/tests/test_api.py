"""HTTP tests for the public and admin endpoints."""

from datetime import timedelta

import pytest

from app.clock import utcnow
from app.models import ArticleStatus


@pytest.mark.asyncio
async def test_feed_page_shape(client, categories, make_article):
    for _ in range(3):
        await make_article(category=categories["스포츠"])

    response = await client.get("/api/articles", params={"page": 1, "limit": 2})

    assert response.status_code == 200
    assert "s-maxage=60" in response.headers["cache-control"]
    body = response.json()
    assert body["hasMore"] is True
    assert body["page"] == 1
    assert body["category"] == "all"
    assert body["total"] == 3
    assert len(body["articles"]) == 2
    first = body["articles"][0]
    assert first["category"] == {"name": "스포츠", "color": categories["스포츠"].color}
    assert "publishedAt" in first


@pytest.mark.asyncio
async def test_feed_unknown_category_is_404(client, categories):
    response = await client.get("/api/articles", params={"category": "연예"})

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 21}])
async def test_feed_rejects_bad_paging(client, params):
    response = await client.get("/api/articles", params=params)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_article_by_slug_hides_drafts(client, make_article):
    await make_article(slug="live", title="Live")
    await make_article(slug="hidden", status=ArticleStatus.DRAFT)

    live = await client.get("/api/articles/live")
    hidden = await client.get("/api/articles/hidden")

    assert live.status_code == 200
    assert live.json()["title"] == "Live"
    assert hidden.status_code == 404


@pytest.mark.asyncio
async def test_view_counting(client, session, make_article):
    article = await make_article()

    response = await client.post(f"/api/articles/{article.id}/views")
    await session.refresh(article)

    assert response.json() == {"success": True, "silent": False, "message": None}
    assert article.views == 1


@pytest.mark.asyncio
async def test_view_counting_never_errors(client):
    response = await client.post("/api/articles/not-a-uuid/views")

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["silent"] is True


@pytest.mark.asyncio
async def test_search(client, make_article):
    await make_article(title="손흥민 결승골")
    await make_article(title="금리 인상")

    response = await client.get("/api/search", params={"q": "결승"})

    assert response.status_code == 200
    assert response.json()["query"] == "결승"
    assert [a["title"] for a in response.json()["articles"]] == ["손흥민 결승골"]


@pytest.mark.asyncio
async def test_categories_in_display_order(client, categories):
    response = await client.get("/api/categories")

    names = [c["name"] for c in response.json()["categories"]]
    assert names == ["건강", "스포츠", "정치/시사", "경제", "라이프", "테크"]


@pytest.mark.asyncio
async def test_publish_scheduled_endpoint(client, make_article):
    await make_article(title="Due", status=ArticleStatus.SCHEDULED, published_at=utcnow() - timedelta(minutes=1))

    first = await client.post("/api/posts/publish-scheduled")
    second = await client.get("/api/posts/publish-scheduled")

    assert first.status_code == 200
    assert first.json()["publishedCount"] == 1
    assert first.json()["publishedArticles"][0]["title"] == "Due"
    assert first.json()["message"] == "1개 글이 성공적으로 발행되었습니다."
    assert second.json()["publishedCount"] == 0
    assert second.json()["message"] == "발행할 예약된 글이 없습니다."


@pytest.mark.asyncio
async def test_admin_requires_login(client):
    assert (await client.get("/api/admin/articles")).status_code == 401
    bad = await client.get("/api/admin/articles", headers={"Authorization": "Bearer nope"})
    assert bad.status_code == 401


@pytest.mark.asyncio
async def test_login_with_wrong_password(client):
    response = await client.post("/api/admin/login", json={"username": "pickteum1", "password": "wrong"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_token(client, admin_headers):
    assert (await client.post("/api/admin/logout", headers=admin_headers)).status_code == 204
    assert (await client.get("/api/admin/articles", headers=admin_headers)).status_code == 401


@pytest.mark.asyncio
async def test_admin_article_lifecycle(client, categories, admin_headers):
    created = await client.post(
        "/api/admin/articles",
        json={"title": "Editor Test", "content": "<p>hi</p>", "category": "테크", "tags": "a, b"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    article = created.json()
    assert article["slug"] == "editor-test"
    assert article["status"] == "draft"
    assert article["tags"] == ["a", "b"]
    assert article["category"]["name"] == "테크"

    duplicate = await client.post(
        "/api/admin/articles",
        json={"title": "Other", "slug": "editor-test", "category": "테크"},
        headers=admin_headers,
    )
    assert duplicate.status_code == 409

    past = await client.post(
        f"/api/admin/articles/{article['id']}/schedule",
        json={"published_at": "2020-01-01T00:00:00Z"},
        headers=admin_headers,
    )
    assert past.status_code == 400

    published = await client.post(f"/api/admin/articles/{article['id']}/publish", headers=admin_headers)
    assert published.status_code == 200
    assert published.json()["status"] == "published"

    feed = await client.get("/api/articles")
    assert [a["title"] for a in feed.json()["articles"]] == ["Editor Test"]

    deleted = await client.delete(f"/api/admin/articles/{article['id']}", headers=admin_headers)
    assert deleted.status_code == 204
    missing = await client.get(f"/api/admin/articles/{article['id']}", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_admin_unknown_category_is_404(client, categories, admin_headers):
    response = await client.post(
        "/api/admin/articles", json={"title": "x", "category": "연예"}, headers=admin_headers
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_autosave_endpoint(client, make_article, admin_headers):
    article = await make_article(status=ArticleStatus.DRAFT)

    saved = await client.put(
        f"/api/admin/articles/{article.id}/autosave",
        json={"title": "Autosaved", "content": "<p>typing</p>"},
        headers=admin_headers,
    )
    empty = await client.put(
        f"/api/admin/articles/{article.id}/autosave",
        json={"title": "", "content": ""},
        headers=admin_headers,
    )

    assert saved.status_code == 200
    assert saved.json()["saved"] is True
    assert empty.json() == {"saved": False, "saved_at": None, "reason": "empty"}


@pytest.mark.asyncio
async def test_category_admin(client, categories, admin_headers):
    created = await client.post(
        "/api/admin/categories", json={"name": "연예", "color": "#FF00AA"}, headers=admin_headers
    )
    assert created.status_code == 201

    clash = await client.post("/api/admin/categories", json={"name": "연예"}, headers=admin_headers)
    assert clash.status_code == 409

    bad_color = await client.post(
        "/api/admin/categories", json={"name": "기타", "color": "red"}, headers=admin_headers
    )
    assert bad_color.status_code == 422

    category_id = created.json()["id"]
    renamed = await client.patch(
        f"/api/admin/categories/{category_id}", json={"name": "연예가"}, headers=admin_headers
    )
    assert renamed.json()["name"] == "연예가"

    assert (await client.delete(f"/api/admin/categories/{category_id}", headers=admin_headers)).status_code == 204
