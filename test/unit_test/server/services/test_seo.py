"""
Unit tests for sitemap and RSS rendering.
"""

from datetime import datetime
from xml.etree import ElementTree as ET

from neurmatic.core.database.entities.articles import Article
from neurmatic.server.services.seo import SITEMAP_NS, SitemapURL, render_rss, render_sitemap

NS = {"s": SITEMAP_NS}


class TestRenderSitemap:
    def test_urls_and_optional_fields(self):
        xml = render_sitemap(
            [
                SitemapURL("https://neurmatic.com/", changefreq="daily", priority=1.0),
                SitemapURL("https://neurmatic.com/news/a", lastmod=datetime(2024, 1, 2, 3, 4, 5)),
            ]
        )

        assert xml.startswith(b"<?xml")
        root = ET.fromstring(xml)
        urls = root.findall("s:url", NS)
        assert len(urls) == 2
        assert urls[0].find("s:loc", NS).text == "https://neurmatic.com/"
        assert urls[0].find("s:changefreq", NS).text == "daily"
        assert urls[0].find("s:priority", NS).text == "1.0"
        assert urls[0].find("s:lastmod", NS) is None
        assert urls[1].find("s:lastmod", NS).text == "2024-01-02T03:04:05Z"

    def test_values_are_escaped(self):
        xml = render_sitemap([SitemapURL("https://x.test/?a=1&b=2")])
        assert b"&amp;" in xml
        assert ET.fromstring(xml).find("s:url/s:loc", NS).text == "https://x.test/?a=1&b=2"


class TestRenderRss:
    def _article(self, **overrides) -> Article:
        values = dict(
            title="Agents & Tools",
            slug="agents-tools",
            content="body",
            summary="Short",
            category="research",
            author_id="u1",
            status="published",
            published_at=datetime(2024, 5, 1, 12, 0, 0),
        )
        values.update(overrides)
        return Article(**values)

    def test_channel_and_items(self):
        xml = render_rss("https://neurmatic.com", "Neurmatic", [self._article()])

        channel = ET.fromstring(xml).find("channel")
        assert channel.find("title").text == "Neurmatic"
        assert channel.find("link").text == "https://neurmatic.com/news"
        item = channel.find("item")
        assert item.find("title").text == "Agents & Tools"
        assert item.find("link").text == "https://neurmatic.com/news/agents-tools"
        assert item.find("guid").get("isPermaLink") == "true"
        assert item.find("category").text == "research"
        assert item.find("pubDate").text == "Wed, 01 May 2024 12:00:00 +0000"

    def test_optional_fields(self):
        article = self._article(summary=None, category=None)
        item = ET.fromstring(render_rss("https://n.test", "N", [article])).find("channel/item")

        assert item.find("description").text in (None, "")
        assert item.find("category") is None

    def test_empty_feed(self):
        channel = ET.fromstring(render_rss("https://n.test", "N", [])).find("channel")
        assert channel.findall("item") == []
