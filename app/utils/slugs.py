import re


def slugify(text: str) -> str:
    """Lower-case, dash-separated slug: spaces become dashes, other non-word characters are dropped."""
    if not text:
        return ""
    slug = text.lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w\-]+", "", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")
