"""
SEO endpoints: XML sitemap and RSS feed, served at the site root.
"""

from fastapi import APIRouter, Response

from neurmatic.server.core.config import settings
from neurmatic.server.core.constant import PROJECT_NAME
from neurmatic.server.services.deps import ReposDep
from neurmatic.server.services.seo import RSS_ITEM_COUNT, collect_sitemap_urls, render_rss, render_sitemap

router = APIRouter(tags=["seo"])


@router.get(
    "/sitemap.xml",
    summary="XML Sitemap",
    description="Sitemap of published articles, open forum topics and active jobs.",
    response_class=Response,
    responses={200: {"content": {"application/xml": {}}}},
)
async def sitemap(repos: ReposDep) -> Response:
    urls = await collect_sitemap_urls(repos, settings.site_url)
    return Response(content=render_sitemap(urls), media_type="application/xml")


@router.get(
    "/rss.xml",
    summary="RSS Feed",
    description="RSS 2.0 feed of the latest published articles.",
    response_class=Response,
    responses={200: {"content": {"application/rss+xml": {}}}},
)
async def rss(repos: ReposDep) -> Response:
    articles = await repos.articles.latest_published(RSS_ITEM_COUNT)
    body = render_rss(settings.site_url.rstrip("/"), PROJECT_NAME, articles)
    return Response(content=body, media_type="application/rss+xml")
