#!/usr/bin/env python
"""Idempotent seed script for demo locations, users and help-center content.

Usage:
    python backend/scripts/seed_demo.py               # seed normally
    python backend/scripts/seed_demo.py --show-users  # print users per role (after ensuring seed)
    python backend/scripts/seed_demo.py --dry-run     # run logic then rollback (no DB changes)
"""
from __future__ import annotations
import os, sys, argparse, textwrap
from sqlalchemy import select, text

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from saveplate import create_app, get_db  # type: ignore
from saveplate.models.user import Base, User
from saveplate.models.location import Location
from saveplate.models.knowledge_base import KBArticle
from saveplate.models.reporting import ESGReport, Benchmark
import saveplate.models.waste_log  # noqa: F401
import saveplate.models.consent  # noqa: F401
import saveplate.models.audit  # noqa: F401
import saveplate.models.purchase_order  # noqa: F401
from saveplate.models.vendor import Vendor
from saveplate.models.inventory import InventoryItem
from seeds.demo_data import LOCATIONS, USERS, KB_ARTICLES, ESG_REPORTS, BENCHMARKS, VENDORS, INVENTORY_ITEMS


def ensure_locations(session):
    existing = {l.location_name: l for l in session.execute(select(Location)).scalars().all()}
    ordered, created = [], 0
    for row in LOCATIONS:
        loc = existing.get(row['location_name'])
        if not loc:
            loc = Location(country='US', is_active=True, **row)
            session.add(loc)
            created += 1
        ordered.append(loc)
    session.flush()
    return ordered, created


def ensure_users(session, locations):
    password = os.getenv('SEED_DEMO_PASSWORD', 'ChangeMe123!')
    existing = {u.email for u in session.execute(select(User)).scalars().all()}
    created = 0
    for row in USERS:
        if row['email'] in existing:
            continue
        loc = locations[row['location']] if row['location'] is not None else None
        user = User(
            email=row['email'], full_name=row['full_name'], role=row['role'], password_hash='',
            location_id=loc.id if loc else None, restaurant_id=loc.restaurant_id if loc else None,
        )
        user.set_password(password)
        session.add(user)
        created += 1
    return created


def ensure_articles(session):
    existing = {a.slug for a in session.execute(select(KBArticle)).scalars().all()}
    created = 0
    for row in KB_ARTICLES:
        if row['slug'] not in existing:
            session.add(KBArticle(published=True, **row))
            created += 1
    return created


def ensure_reports(session, locations):
    created = 0
    for row in ESG_REPORTS:
        fields = dict(row)
        loc = locations[fields.pop('location')]
        found = session.execute(select(ESGReport.id).where(
            ESGReport.location_id == loc.id,
            ESGReport.report_type == fields['report_type'],
            ESGReport.report_period_start == fields['report_period_start'],
        )).scalar_one_or_none()
        if not found:
            session.add(ESGReport(location_id=loc.id, **fields))
            created += 1
    for row in BENCHMARKS:
        fields = dict(row)
        loc = locations[fields.pop('location')]
        found = session.execute(select(Benchmark.id).where(
            Benchmark.location_id == loc.id, Benchmark.period_start == fields['period_start'],
        )).scalar_one_or_none()
        if not found:
            session.add(Benchmark(location_id=loc.id, **fields))
            created += 1
    return created


def ensure_vendors(session):
    existing = {v.name: v for v in session.execute(select(Vendor)).scalars().all()}
    ordered, created = [], 0
    for row in VENDORS:
        vendor = existing.get(row['name'])
        if not vendor:
            vendor = Vendor(is_active=True, **row)
            session.add(vendor)
            created += 1
        ordered.append(vendor)
    session.flush()
    return ordered, created


def ensure_inventory(session, locations, vendors):
    created = 0
    for row in INVENTORY_ITEMS:
        fields = dict(row)
        loc = locations[fields.pop('location')]
        vendor = vendors[fields.pop('supplier')]
        found = session.execute(select(InventoryItem.id).where(
            InventoryItem.location_id == loc.id, InventoryItem.name == fields['name'],
        )).scalar_one_or_none()
        if not found:
            session.add(InventoryItem(location_id=loc.id, supplier_id=vendor.id, **fields))
            created += 1
    return created


def print_user_summary(session):
    rows = session.execute(select(User).order_by(User.role, User.email)).scalars().all()
    if not rows:
        print("[INFO] No users present.")
        return
    email_w = max(len(u.email) for u in rows)
    print(f"{'Email'.ljust(email_w)} | Role     | Location")
    print('-' * (email_w + 25))
    for u in rows:
        print(f"{u.email.ljust(email_w)} | {u.role.ljust(8)} | {u.location_id if u.location_id is not None else 'all'}")


def parse_args():
    p = argparse.ArgumentParser(
        description="Seed SavePlate demo data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_demo.py\n  dry run: seed_demo.py --dry-run\n  show users: seed_demo.py --show-users\n""")
    )
    p.add_argument('--show-users', action='store_true', help='Print users and roles after seeding')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    return p.parse_args()


def main():
    args = parse_args()
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            session.execute(text('SELECT 1 FROM purchase_orders LIMIT 1'))
        except Exception:
            # bootstrap fallback; real environments run alembic upgrade
            session.rollback()
            Base.metadata.create_all(session.get_bind())
        finally:
            session.commit()

    with app.app_context():
        session = get_db()
        try:
            locations, created_l = ensure_locations(session)
            created_u = ensure_users(session, locations)
            created_a = ensure_articles(session)
            created_r = ensure_reports(session, locations)
            vendors, created_v = ensure_vendors(session)
            created_i = ensure_inventory(session, locations, vendors)
            summary = (f"Locations: {created_l}, Users: {created_u}, Articles: {created_a}, Reports: {created_r}, "
                       f"Vendors: {created_v}, Inventory items: {created_i}")
            if args.dry_run:
                session.rollback()
                print(f"[DRY-RUN] (rolled back) would create {summary}")
            else:
                session.commit()
                app.logger.info('demo seed committed')
                print(f"[DONE] created {summary}")
            if args.show_users:
                print('\nUsers:')
                print_user_summary(session)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


if __name__ == '__main__':
    main()
