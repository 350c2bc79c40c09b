"""
Report posts whose images are missing, not on Cloudinary, or unreachable.
Run from project root before a deploy:
  python -m app.scripts.check_image_links
Exit code 0 when every image resolves, 1 when any post has an issue.
"""

import logging
import re
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx

from app.core.database import session_scope
from app.models import Post

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

CLOUDINARY_HOST_MARKER = "cloudinary.com"
URL_PATTERN = re.compile(r"https?://[^\s\"'<>]+")
IMAGE_URL_PATTERN = re.compile(r"\.(jpg|jpeg|png|gif|webp)", re.IGNORECASE)
REQUEST_TIMEOUT_SEC = 10.0


@dataclass
class PostImageReport:
    post_id: int
    title: str
    issues: list[str] = field(default_factory=list)


def content_image_urls(content: str | None) -> list[str]:
    """Image URLs (by extension) referenced anywhere in a post body."""
    if not content:
        return []
    return [u for u in URL_PATTERN.findall(content) if IMAGE_URL_PATTERN.search(u)]


def url_ok(client: httpx.Client, url: str) -> bool:
    """True if a HEAD request succeeds (2xx after redirects)."""
    try:
        resp = client.head(url, follow_redirects=True, timeout=REQUEST_TIMEOUT_SEC)
    except httpx.HTTPError:
        return False
    return resp.is_success


def check_post(client: httpx.Client, post: Post) -> PostImageReport:
    report = PostImageReport(post_id=post.id, title=post.title or "")
    if not post.thumbnail:
        report.issues.append("Thumbnail: missing")
    elif CLOUDINARY_HOST_MARKER not in post.thumbnail:
        report.issues.append(f"Thumbnail not hosted on Cloudinary: {post.thumbnail}")
    elif not url_ok(client, post.thumbnail):
        report.issues.append(f"Thumbnail unreachable: {post.thumbnail}")

    for url in content_image_urls(post.content):
        if not url_ok(client, url):
            report.issues.append(f"Content image unreachable: {url}")
    return report


def check_posts(client: httpx.Client, posts: Iterable[Post]) -> list[PostImageReport]:
    """Reports for the posts that have at least one issue."""
    return [r for r in (check_post(client, p) for p in posts) if r.issues]


def main() -> int:
    with session_scope() as db, httpx.Client() as client:
        posts = db.query(Post).order_by(Post.id).all()
        logger.info("Checking images of %s posts", len(posts))
        bad = check_posts(client, posts)

    if not bad:
        logger.info("All images OK")
        return 0
    for report in bad:
        logger.warning("Post id=%s '%s'", report.post_id, report.title)
        for issue in report.issues:
            logger.warning("  %s", issue)
    return 1


if __name__ == "__main__":
    sys.exit(main())
