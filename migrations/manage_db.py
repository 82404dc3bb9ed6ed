import logging
import argparse
from alembic.config import Config
from alembic import command

from memoria.db.init_db import create_all_tables
from memoria.db.session import SessionLocal
from memoria.modules.auth.services.auth import purge_expired_registrations

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

def run_migration(args):
    """Run database migrations"""
    try:
        alembic_cfg = Config("alembic.ini")
        if args.downgrade:
            command.downgrade(alembic_cfg, args.revision)
        else:
            command.upgrade(alembic_cfg, args.revision)
        logger.info(f"Migration {'downgrade' if args.downgrade else 'upgrade'} to {args.revision} completed")
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        raise

def create_migration(args):
    """Create a new migration"""
    try:
        alembic_cfg = Config("alembic.ini")
        command.revision(
            alembic_cfg,
            message=args.message,
            autogenerate=True
        )
        logger.info("Migration created successfully")
    except Exception as e:
        logger.error(f"Failed to create migration: {e}")
        raise

def create_tables(args):
    """Create missing tables straight from the models, bypassing Alembic"""
    if not create_all_tables():
        raise SystemExit(1)

def purge_registrations(args):
    """Delete sign-ups whose verification code has expired"""
    db = SessionLocal()
    try:
        removed = purge_expired_registrations(db)
        db.commit()
        logger.info(f"Purged {removed} expired pending registrations")
    finally:
        db.close()

def main():
    parser = argparse.ArgumentParser(description="Database management commands")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Migration command
    migrate_parser = subparsers.add_parser("migrate", help="Run migrations")
    migrate_parser.add_argument("--downgrade", action="store_true", help="Downgrade instead of upgrade")
    migrate_parser.add_argument("revision", nargs="?", default="head", help="Revision to migrate to")
    migrate_parser.set_defaults(func=run_migration)

    # Create migration command
    create_parser = subparsers.add_parser("create", help="Create a new migration")
    create_parser.add_argument("message", help="Migration message")
    create_parser.set_defaults(func=create_migration)

    tables_parser = subparsers.add_parser("create-tables", help="Create tables without migrations (development)")
    tables_parser.set_defaults(func=create_tables)

    purge_parser = subparsers.add_parser("purge-registrations", help="Remove expired pending registrations")
    purge_parser.set_defaults(func=purge_registrations)

    args = parser.parse_args()
    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
