"""
News endpoints: articles and bookmarks.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from neurmatic.core.database.entities.users import User, UserRole
from neurmatic.core.models.io.articles import ArticleCreate, ArticleRead, ArticleUpdate, BookmarkRead
from neurmatic.core.models.io.common import Page
from neurmatic.server.services.deps import (
    ArticleServiceDep,
    CurrentUserDep,
    OptionalUserDep,
    PaginationDep,
    require_roles,
)

router = APIRouter(tags=["articles"])
bookmarks_router = APIRouter(tags=["articles"])

require_editor = require_roles(UserRole.MODERATOR, UserRole.ADMIN)


@router.post(
    "",
    response_model=ArticleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Article",
    description="Create a news article. Moderators and admins only.",
    response_description="The created article.",
    responses={403: {"description": "Caller is not a moderator or admin"}},
)
async def create_article(
    data: ArticleCreate,
    service: ArticleServiceDep,
    user: User = Depends(require_editor),
) -> ArticleRead:
    """
    Create an article.

    - **title**: Headline; the URL slug is derived from it and made unique.
    - **tags**: Up to 20 tags, used by content-based recommendations.
    - **status**: `draft`, `published` or `archived`; `published` stamps the publication time.
    """
    return ArticleRead.model_validate(await service.create(user, data))


@router.get(
    "",
    response_model=Page[ArticleRead],
    summary="List Articles",
    description="Published articles, newest first, optionally filtered by category or tag.",
)
async def list_articles(
    pagination: PaginationDep,
    service: ArticleServiceDep,
    category: Optional[str] = Query(None, max_length=100),
    tag: Optional[str] = Query(None, max_length=100),
) -> Page[ArticleRead]:
    items, total = await service.list_published(pagination.limit, pagination.offset, category=category, tag=tag)
    return Page[ArticleRead](
        items=[ArticleRead.model_validate(article) for article in items],
        total=total,
        page=pagination.page,
        limit=pagination.limit,
    )


@router.get(
    "/{slug}",
    response_model=ArticleRead,
    summary="Get Article",
    description="Get an article by slug and count the view.",
    responses={404: {"description": "Article not found"}},
)
async def get_article(slug: str, service: ArticleServiceDep, viewer: OptionalUserDep) -> ArticleRead:
    return ArticleRead.model_validate(await service.get_by_slug(slug, viewer))


@router.put(
    "/{article_id}",
    response_model=ArticleRead,
    summary="Update Article",
    responses={403: {"description": "Caller is not a moderator or admin"}, 404: {"description": "Article not found"}},
)
async def update_article(
    article_id: str,
    data: ArticleUpdate,
    service: ArticleServiceDep,
    user: User = Depends(require_editor),
) -> ArticleRead:
    return ArticleRead.model_validate(await service.update(article_id, data))


@router.delete(
    "/{article_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Article",
    description="Soft-delete an article.",
    responses={403: {"description": "Caller is not a moderator or admin"}, 404: {"description": "Article not found"}},
)
async def delete_article(
    article_id: str,
    service: ArticleServiceDep,
    user: User = Depends(require_editor),
) -> Response:
    await service.delete(article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{article_id}/bookmark",
    response_model=BookmarkRead,
    status_code=status.HTTP_201_CREATED,
    summary="Bookmark Article",
    responses={404: {"description": "Article not found"}, 409: {"description": "Already bookmarked"}},
)
async def bookmark_article(article_id: str, user: CurrentUserDep, service: ArticleServiceDep) -> BookmarkRead:
    return BookmarkRead.model_validate(await service.bookmark(user, article_id))


@router.delete(
    "/{article_id}/bookmark",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Bookmark",
    responses={404: {"description": "Bookmark not found"}},
)
async def remove_bookmark(article_id: str, user: CurrentUserDep, service: ArticleServiceDep) -> Response:
    await service.remove_bookmark(user, article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@bookmarks_router.get(
    "",
    response_model=list[BookmarkRead],
    summary="List My Bookmarks",
)
async def list_bookmarks(user: CurrentUserDep, service: ArticleServiceDep) -> list[BookmarkRead]:
    return [BookmarkRead.model_validate(bookmark) for bookmark in await service.list_bookmarks(user)]
