from __future__ import annotations
from typing import Dict, List, Optional
from sqlalchemy import func, or_, select

from saveplate import get_db
from saveplate.constants.knowledge_base import KB_CATEGORIES
from saveplate.models.knowledge_base import KBArticle


def helpfulness(article) -> Optional[int]:
    """Percentage of helpful votes, or None when nobody has voted."""
    total = (article.helpful_count or 0) + (article.not_helpful_count or 0)
    if total == 0:
        return None
    return int(round(article.helpful_count / total * 100))


def published_counts_by_category() -> Dict[str, int]:
    session = get_db()
    rows = session.execute(
        select(KBArticle.category, func.count(KBArticle.id))
        .where(KBArticle.published.is_(True))
        .group_by(KBArticle.category)
    ).all()
    return {category: count for category, count in rows}


def categories_with_counts() -> List[Dict[str, object]]:
    counts = published_counts_by_category()
    return [dict(c, articleCount=counts.get(c['id'], 0)) for c in KB_CATEGORIES]


def search_published(term: str, limit: int):
    """Case-insensitive match on title, summary, content or keywords; most viewed first."""
    session = get_db()
    pattern = f'%{term}%'
    text_hits = session.execute(
        select(KBArticle.id)
        .where(KBArticle.published.is_(True))
        .where(or_(
            KBArticle.title.ilike(pattern),
            KBArticle.summary.ilike(pattern),
            KBArticle.content.ilike(pattern),
        ))
    ).scalars()
    matched = set(text_hits)
    # keywords live in a JSON list, so match them in Python
    needle = term.lower()
    published = session.execute(select(KBArticle).where(KBArticle.published.is_(True))).scalars().all()
    hits = [
        a for a in published
        if a.id in matched or any(needle in (kw or '').lower() for kw in (a.search_keywords or []))
    ]
    hits.sort(key=lambda a: (-(a.views or 0), a.id))
    return hits[:limit]


def record_view(article: KBArticle) -> None:
    article.views = (article.views or 0) + 1


def record_vote(article: KBArticle, helpful: bool) -> None:
    if helpful:
        article.helpful_count = (article.helpful_count or 0) + 1
    else:
        article.not_helpful_count = (article.not_helpful_count or 0) + 1
