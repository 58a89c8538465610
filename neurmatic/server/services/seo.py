"""
Sitemap and RSS feed rendering.

Documents are built with ``xml.etree.ElementTree`` so every value is escaped.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional
from xml.etree import ElementTree as ET

from neurmatic.core.database.base import utc_now
from neurmatic.core.database.entities.articles import Article
from neurmatic.core.database.repositories.bundle import SqlRepoBundle

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
SITEMAP_LIMIT = 1000
RSS_ITEM_COUNT = 20


@dataclass
class SitemapURL:
    loc: str
    lastmod: Optional[datetime] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None


def _iso(value: datetime) -> str:
    return value.replace(tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


def render_sitemap(urls: List[SitemapURL]) -> bytes:
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)
    for url in urls:
        node = ET.SubElement(urlset, "url")
        ET.SubElement(node, "loc").text = url.loc
        if url.lastmod is not None:
            ET.SubElement(node, "lastmod").text = _iso(url.lastmod)
        if url.changefreq:
            ET.SubElement(node, "changefreq").text = url.changefreq
        if url.priority is not None:
            ET.SubElement(node, "priority").text = f"{url.priority:.1f}"
    return ET.tostring(urlset, encoding="utf-8", xml_declaration=True)


def render_rss(base_url: str, title: str, articles: List[Article]) -> bytes:
    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = title
    ET.SubElement(channel, "link").text = f"{base_url}/news"
    ET.SubElement(channel, "description").text = f"Latest news from {title}"
    ET.SubElement(channel, "lastBuildDate").text = format_datetime(utc_now().replace(tzinfo=timezone.utc))

    for article in articles:
        link = f"{base_url}/news/{article.slug}"
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = article.title
        ET.SubElement(item, "link").text = link
        ET.SubElement(item, "guid", isPermaLink="true").text = link
        ET.SubElement(item, "description").text = article.summary or ""
        if article.category:
            ET.SubElement(item, "category").text = article.category
        published = article.published_at or article.created_at
        ET.SubElement(item, "pubDate").text = format_datetime(published.replace(tzinfo=timezone.utc))
    return ET.tostring(rss, encoding="utf-8", xml_declaration=True)


async def collect_sitemap_urls(repos: SqlRepoBundle, base_url: str) -> List[SitemapURL]:
    """Static sections plus published articles, open topics and unexpired active jobs."""
    base_url = base_url.rstrip("/")
    urls = [
        SitemapURL(f"{base_url}/", changefreq="daily", priority=1.0),
        SitemapURL(f"{base_url}/news", changefreq="hourly", priority=0.9),
        SitemapURL(f"{base_url}/forum", changefreq="hourly", priority=0.9),
        SitemapURL(f"{base_url}/jobs", changefreq="daily", priority=0.9),
    ]
    for article in await repos.articles.latest_published(SITEMAP_LIMIT):
        urls.append(SitemapURL(f"{base_url}/news/{article.slug}", article.updated_at, "monthly", 0.8))
    for topic in await repos.topics.list_open(SITEMAP_LIMIT):
        urls.append(SitemapURL(f"{base_url}/forum/t/{topic.slug}/{topic.id}", topic.updated_at, "daily", 0.7))

    now = utc_now()
    for job in await repos.jobs.list_active(SITEMAP_LIMIT):
        if job.expires_at is not None and job.expires_at <= now:
            continue
        urls.append(SitemapURL(f"{base_url}/jobs/{job.id}", job.updated_at, "weekly", 0.8))
    return urls
