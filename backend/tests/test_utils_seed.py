"""Test seeding utilities to reduce duplication.

The database is shared by the whole session, so helpers are idempotent
by natural key (location name, user email, article slug).
"""
from datetime import datetime, timezone
from typing import Optional
from flask_jwt_extended import create_access_token
from saveplate import get_db
from saveplate.models.location import Location
from saveplate.models.user import User
from saveplate.models.waste_log import WasteLog
from saveplate.models.knowledge_base import KBArticle
from saveplate.models.vendor import Vendor
from saveplate.models.inventory import InventoryItem


def ensure_location(name: str, restaurant_id: int = 1, is_active: bool = True) -> Location:
    session = get_db()
    loc = session.query(Location).filter_by(location_name=name).one_or_none()
    if not loc:
        loc = Location(location_name=name, restaurant_id=restaurant_id, country='US', is_active=is_active)
        session.add(loc); session.commit(); session.refresh(loc)
    return loc


def ensure_user(email: str, role: str = 'operator', location: Optional[Location] = None, password: str = 'pw') -> User:
    session = get_db()
    u = session.query(User).filter_by(email=email).one_or_none()
    if not u:
        u = User(
            email=email,
            full_name=email.split('@')[0],
            password_hash='',
            role=role,
            location_id=location.id if location else None,
            restaurant_id=location.restaurant_id if location else None,
        )
        u.set_password(password)
        session.add(u); session.commit(); session.refresh(u)
    return u


def jwt_headers(app, user: User, role: Optional[str] = None):
    """Bearer header for `user`; `role` overrides the stored role claim."""
    with app.app_context():
        token = create_access_token(identity=str(user.id), additional_claims={
            'role': role if role is not None else user.role,
            'location_id': user.location_id,
            'restaurant_id': user.restaurant_id,
        })
    return {'Authorization': f'Bearer {token}'}


def create_waste_log(location: Location, user: User, food_item: str = 'Romaine', quantity: float = 1.0,
                     unit: str = 'lbs', estimated_cost: float = 0.0, category: str = 'Spoilage',
                     timestamp: Optional[datetime] = None, root_cause: Optional[str] = None) -> WasteLog:
    """Insert a log directly (bypassing the API) so tests can backdate timestamps."""
    session = get_db()
    log = WasteLog(
        location_id=location.id,
        logged_by=user.id,
        timestamp=timestamp or datetime.now(timezone.utc),
        waste_category=category,
        food_item=food_item,
        quantity=quantity,
        unit=unit,
        estimated_cost=estimated_cost,
        root_cause=root_cause,
    )
    session.add(log); session.commit(); session.refresh(log)
    return log


def ensure_article(slug: str, category: str = 'waste-tracking', title: Optional[str] = None, views: int = 0,
                   helpful_count: int = 0, published: bool = True, keywords=None, content: str = '') -> KBArticle:
    session = get_db()
    a = session.query(KBArticle).filter_by(slug=slug).one_or_none()
    if not a:
        a = KBArticle(
            slug=slug,
            category=category,
            title=title or slug.replace('-', ' ').title(),
            summary=f'Summary of {slug}',
            content=content or f'Content of {slug}',
            views=views,
            helpful_count=helpful_count,
            published=published,
            search_keywords=list(keywords or []),
        )
        session.add(a); session.commit(); session.refresh(a)
    return a


def ensure_vendor(name: str, delivery_time_avg: int = 2, is_active: bool = True) -> Vendor:
    session = get_db()
    v = session.query(Vendor).filter_by(name=name).one_or_none()
    if not v:
        v = Vendor(name=name, phone='555-0100', country='US', rating=0, delivery_time_avg=delivery_time_avg,
                   is_active=is_active, categories=[])
        session.add(v); session.commit(); session.refresh(v)
    return v


def ensure_inventory_item(location: Location, name: str, current_stock: float = 0, reorder_point: float = 0,
                          supplier: Optional[Vendor] = None, category: str = 'produce') -> InventoryItem:
    session = get_db()
    item = session.query(InventoryItem).filter_by(location_id=location.id, name=name).one_or_none()
    if not item:
        item = InventoryItem(
            location_id=location.id, name=name, category=category, unit='ea', current_stock=current_stock,
            reorder_point=reorder_point, reorder_quantity=0, cost_per_unit=1.0,
            supplier_id=supplier.id if supplier else None,
        )
        session.add(item); session.commit(); session.refresh(item)
    return item


__all__ = [
    'ensure_location', 'ensure_user', 'jwt_headers', 'create_waste_log', 'ensure_article',
    'ensure_vendor', 'ensure_inventory_item',
]
