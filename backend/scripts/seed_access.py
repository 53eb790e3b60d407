#!/usr/bin/env python
"""Idempotent seed script for the initial admin and default position permissions.

Usage:
    python backend/scripts/seed_access.py            # seed normally
    python backend/scripts/seed_access.py --show     # print position -> permission table (after seeding)
    python backend/scripts/seed_access.py --dry-run  # run logic then rollback (no DB changes)

Positions that already have permissions are left alone; the admin panel owns
them once they exist.
"""
from __future__ import annotations
import os, sys, argparse, textwrap
from sqlalchemy import select, text

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from sekreterlik import create_app, get_db  # type: ignore
from sekreterlik.models.authz import Base, User
from sekreterlik.constants.roles import Role
from sekreterlik.constants.permissions import DEFAULT_POSITION_PERMISSIONS
from sekreterlik.services.policy import (
    all_position_permissions,
    permissions_for_position,
    replace_position_permissions,
)
import sekreterlik.models.audit  # noqa: F401


def ensure_position_permissions(session):
    created = 0
    for position, keys in DEFAULT_POSITION_PERMISSIONS.items():
        if permissions_for_position(position):
            continue
        replace_position_permissions(position, keys)
        created += 1
    return created


def ensure_initial_admin(session):
    username = os.getenv('SEED_ADMIN_USERNAME', 'admin')
    existing = session.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if existing:
        return False
    user = User(username=username, name='Yönetici', role=Role.ADMIN, password_hash='')
    user.set_password(os.getenv('SEED_ADMIN_PASSWORD', 'ChangeMe123!'))
    session.add(user)
    session.flush()
    print(f"[INFO] Created initial admin user {username} with temporary password.")
    return True


def print_position_summary():
    mapping = all_position_permissions()
    if not mapping:
        print("[INFO] No position permissions present.")
        return
    name_w = max(len(p) for p in mapping)
    print(f"{'Position'.ljust(name_w)} | Count | Keys")
    print('-' * (name_w + 40))
    for position, keys in mapping.items():
        print(f"{position.ljust(name_w)} | {str(len(keys)).rjust(5)} | {', '.join(keys)}")


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Seed initial admin & default position permissions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_access.py\n  dry run: seed_access.py --dry-run\n  show table: seed_access.py --show\n""")
    )
    p.add_argument('--show', action='store_true', help='Print position permissions after seeding')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            session.execute(text('SELECT 1 FROM position_permissions LIMIT 1'))
        except Exception:
            # Bootstrap without migrations; prefer `alembic upgrade head` in real environments
            session.rollback()
            Base.metadata.create_all(session.get_bind())

        try:
            created_p = ensure_position_permissions(session)
            created_admin = ensure_initial_admin(session)
            if args.dry_run:
                session.rollback()
                print(f"[DRY-RUN] (rolled back) Positions would seed: {created_p}, admin would create: {created_admin}")
            else:
                session.commit()
                print(f"[DONE] Positions seeded: {created_p}, admin created: {created_admin}")
            if args.show:
                print('\nPosition Permission Summary:')
                print_position_summary()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


if __name__ == '__main__':
    main()
