from __future__ import annotations
from flask import Blueprint, request, abort, current_app
from sqlalchemy import select
from saveplate import get_db
from saveplate.constants.knowledge_base import KB_CATEGORY_IDS, DEFAULT_ARTICLE_LIST_LIMIT, SEARCH_RESULT_LIMIT
from saveplate.models.knowledge_base import KBArticle, KBFeedback
from saveplate.decorators.auth import require_roles, public
from saveplate.decorators.audit import audit_log
from saveplate.services.knowledge_base import (
    categories_with_counts, helpfulness, record_view, record_vote, search_published,
)
from saveplate.services.policy import current_user_id
from saveplate.utils.validation import json_object
from saveplate.utils.filters import apply_filters
from saveplate.utils.listing import cached_list

kb_bp = Blueprint('knowledge_base', __name__)

MAX_SHORT_LIST = 50


def _short_limit() -> int:
    try:
        limit = int(request.args.get('limit') or DEFAULT_ARTICLE_LIST_LIMIT)
    except ValueError:
        abort(400, description='limit must be int')
    return max(1, min(limit, MAX_SHORT_LIST))


def _published():
    return select(KBArticle).where(KBArticle.published.is_(True))


@kb_bp.get('/categories')
@public
def list_categories():
    return {'data': categories_with_counts()}


@kb_bp.get('/articles')
@public
def list_articles():
    session = get_db()
    q = session.query(KBArticle).filter(KBArticle.published.is_(True))
    filter_specs = {
        'category': {'choices': KB_CATEGORY_IDS, 'op': lambda qu, v: qu.filter(KBArticle.category == v)},
    }
    q = apply_filters(q, filter_specs, request.args)
    # newest first; id breaks ties within the same second
    q = q.order_by(KBArticle.created_at.desc(), KBArticle.id.desc())
    return cached_list(q, _article_summary, 'updated_at')


@kb_bp.get('/articles/search')
@public
def search_articles():
    term = (request.args.get('q') or '').strip()
    if not term:
        abort(400, description='q required')
    hits = search_published(term, SEARCH_RESULT_LIMIT)
    return {'query': term, 'data': [_article_summary(a) for a in hits]}


@kb_bp.get('/articles/popular')
@public
def popular_articles():
    session = get_db()
    rows = session.execute(
        _published().order_by(KBArticle.views.desc(), KBArticle.id.asc()).limit(_short_limit())
    ).scalars().all()
    return {'data': [_article_summary(a) for a in rows]}


@kb_bp.get('/articles/helpful')
@public
def helpful_articles():
    session = get_db()
    rows = session.execute(
        _published().order_by(KBArticle.helpful_count.desc(), KBArticle.id.asc()).limit(_short_limit())
    ).scalars().all()
    return {'data': [_article_summary(a) for a in rows]}


@kb_bp.get('/articles/<slug>')
@public
def get_article(slug: str):
    """Full article; each read counts as a view."""
    session = get_db()
    article = session.execute(_published().where(KBArticle.slug == slug)).scalar_one_or_none()
    if not article:
        abort(404)
    record_view(article)
    session.commit()
    payload = _article_summary(article)
    payload.update({
        'content': article.content,
        'video_url': article.video_url,
        'related_articles': article.related_articles or [],
        'helpful_count': article.helpful_count,
        'not_helpful_count': article.not_helpful_count,
    })
    return payload


@kb_bp.post('/articles/<slug>/feedback')
@require_roles()
@audit_log('KB.FEEDBACK', entity='KBArticle', entity_id_key='article_id', meta_keys=['helpful'])
def article_feedback(slug: str):
    session = get_db()
    article = session.execute(_published().where(KBArticle.slug == slug)).scalar_one_or_none()
    if not article:
        abort(404)
    data = json_object()
    helpful = data.get('helpful')
    if not isinstance(helpful, bool):
        abort(400, description='helpful must be a boolean')
    user_id = current_user_id()
    existing = session.execute(
        select(KBFeedback.id).where(KBFeedback.article_id == article.id, KBFeedback.user_id == user_id)
    ).scalar_one_or_none()
    if existing:
        abort(400, description='feedback already recorded')
    session.add(KBFeedback(
        article_id=article.id, user_id=user_id, helpful=helpful, feedback_text=data.get('feedback_text') or None,
    ))
    record_vote(article, helpful)
    session.commit()
    current_app.logger.info('kb feedback: article=%s helpful=%s', article.slug, helpful)
    return {
        'article_id': article.id,
        'helpful': helpful,
        'helpful_count': article.helpful_count,
        'not_helpful_count': article.not_helpful_count,
        'helpfulness': helpfulness(article),
    }, 201


def _article_summary(a: KBArticle):
    return {
        'id': a.id,
        'slug': a.slug,
        'category': a.category,
        'title': a.title,
        'summary': a.summary,
        'views': a.views,
        'helpfulness': helpfulness(a),
    }
