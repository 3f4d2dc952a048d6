"""
Schema creation and sample data.

Run directly to prepare a fresh database:
    python init_db.py [--seed] [--drop]
"""
import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from config.settings import load_settings
from database import Base, ConnectionPool
from domain.value_objects.slug import slugify
from dtos.request.post_request import NewPostRequest
from exceptions import ApplicationError, DatabaseError
from repositories.post_repository import PostRepository
import models  # noqa: F401  (registers the posts table on Base.metadata)

logger = logging.getLogger(__name__)

SAMPLE_POSTS = [
    NewPostRequest(title="First post", body="Lorem ipsum"),
    NewPostRequest(title="Second post", body="Dolor sit amet"),
]


def create_tables(pool: ConnectionPool) -> None:
    """
    Create every table that does not exist yet.
    Safe to call multiple times.
    """
    try:
        Base.metadata.create_all(pool.engine)
    except SQLAlchemyError as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise DatabaseError("create_tables", f"Failed to initialize schema: {e}") from e
    logger.info("Database schema initialized")


def drop_tables(pool: ConnectionPool) -> None:
    """Drop every table this service owns."""
    Base.metadata.drop_all(pool.engine)
    logger.warning("Database schema dropped")


def seed_sample_posts(repo: PostRepository) -> int:
    """
    Insert the sample posts, skipping any whose slug is already present.

    Returns:
        Number of posts inserted
    """
    inserted = 0
    for sample in SAMPLE_POSTS:
        if repo.find_by_slug(slugify(sample.title)):
            logger.info(f"Sample post '{sample.title}' already present, skipping")
            continue
        repo.create(sample)
        inserted += 1
    return inserted


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create the blog schema")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    parser.add_argument("--seed", action="store_true", help="Insert sample posts")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    try:
        settings = load_settings()
    except ApplicationError as e:
        logger.error(f"❌ {e.message}")
        return 1

    pool = ConnectionPool.from_settings(settings)
    try:
        if args.drop:
            drop_tables(pool)
        create_tables(pool)
        if args.seed:
            with pool.acquire() as session:
                count = seed_sample_posts(PostRepository(session))
            logger.info(f"✅ Seeded {count} sample post(s)")
    except ApplicationError as e:
        logger.error(f"❌ {e.message}")
        return 1
    finally:
        pool.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
