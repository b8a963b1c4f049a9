from dataclasses import dataclass

from bs4 import BeautifulSoup

_BOILERPLATE_TAGS = (
    "script", "style", "noscript", "nav", "header", "footer",
    "aside", "form", "iframe", "svg",
)
_MAIN_SELECTORS = ("article", "main", "[role=main]", "#content", ".content")


@dataclass(frozen=True)
class HtmlContent:
    title: str | None
    body: str
    author: str | None
    date: str | None
    description: str | None


def _meta(soup: BeautifulSoup, *names: str) -> str | None:
    for name in names:
        tag = soup.find("meta", attrs={"property": name}) or soup.find(
            "meta", attrs={"name": name}
        )
        if tag and tag.get("content"):
            return str(tag["content"]).strip()
    return None


class HtmlReader:
    """Main-content extraction from HTML pages with boilerplate removal."""

    def read(self, html: str) -> HtmlContent:
        soup = BeautifulSoup(html, "lxml")

        title = _meta(soup, "og:title")
        if not title and soup.title and soup.title.string:
            title = soup.title.string.strip()
        author = _meta(soup, "author", "article:author")
        date = _meta(soup, "article:published_time", "date", "pubdate")
        if not date:
            time_tag = soup.find("time")
            if time_tag:
                date = str(time_tag.get("datetime") or time_tag.get_text(strip=True)) or None
        description = _meta(soup, "description", "og:description")

        for tag in soup(list(_BOILERPLATE_TAGS)):
            tag.decompose()

        container = None
        for selector in _MAIN_SELECTORS:
            container = soup.select_one(selector)
            if container is not None:
                break
        if container is None:
            container = soup.body or soup

        lines = [line.strip() for line in container.get_text("\n").splitlines()]
        body = "\n".join(line for line in lines if line)
        return HtmlContent(
            title=title or None,
            body=body,
            author=author,
            date=date,
            description=description,
        )
