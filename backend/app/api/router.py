"""API main router - aggregates all endpoint routers."""

from fastapi import APIRouter

from app.api import admin, articles, categories, media, posts, short_links, syndication

api_router = APIRouter()

# Public endpoints
api_router.include_router(articles.router, prefix="/articles", tags=["articles"])
api_router.include_router(articles.search_router, tags=["articles"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(posts.router, prefix="/posts", tags=["publishing"])
api_router.include_router(short_links.router, prefix="/short", tags=["short-links"])

# Admin endpoints
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(media.router, prefix="/admin/media", tags=["media"])

# Served from the site root, outside the API prefix
site_router = APIRouter()
site_router.include_router(syndication.router, tags=["syndication"])
site_router.include_router(short_links.redirect_router, tags=["short-links"])
