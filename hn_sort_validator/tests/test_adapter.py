import asyncio

from hn_sort_validator.adapters import HackerNewsAdapter, get_adapter_for, parse_listing_html


LISTING_HTML = """
<html><body><table>
  <tr class="athing" id="1">
    <td class="title"><span class="titleline"><a href="https://a.example">First story</a></span></td>
  </tr>
  <tr><td class="subtext">
    <span class="age" title="2025-01-15T12:00:00 1736942400"><a href="item?id=1">2 minutes ago</a></span>
  </td></tr>
  <tr class="spacer"></tr>
  <tr class="athing" id="2">
    <td class="title"><span class="titleline"><a href="https://b.example">Second &amp; older</a></span></td>
  </tr>
  <tr><td class="subtext">
    <span class="age" title="2025-01-15T11:58:00"><a href="item?id=2">4 minutes ago</a></span>
  </td></tr>
  <tr class="athing" id="3">
    <td class="title"><span class="titleline"></span></td>
  </tr>
  <tr><td class="subtext"></td></tr>
</table>
<a class="morelink" href="newest?next=3">More</a>
</body></html>
"""


def test_parse_listing_html_pairs_rows_with_subtext():
    items = parse_listing_html(LISTING_HTML)

    assert items == [
        {"title": "First story", "timestamp_raw": "2025-01-15T12:00:00", "relative_age_text": "2 minutes ago"},
        {"title": "Second & older", "timestamp_raw": "2025-01-15T11:58:00", "relative_age_text": "4 minutes ago"},
        {"title": "(untitled)", "timestamp_raw": None, "relative_age_text": ""},
    ]


def test_parse_listing_html_empty_page():
    assert parse_listing_html("<html><body><p>No items</p></body></html>") == []


def test_adapter_extracts_from_live_page_content():
    class Page:
        url = "https://news.ycombinator.com/newest"

        async def content(self):
            return LISTING_HTML

    adapter = HackerNewsAdapter(Page())
    items = asyncio.run(adapter.extract_current_page())
    assert len(items) == 3


def test_registry_returns_hacker_news_adapter():
    assert get_adapter_for("https://news.ycombinator.com/newest") is HackerNewsAdapter
