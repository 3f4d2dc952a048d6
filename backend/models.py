from typing import NamedTuple

from sqlalchemy import Column, Integer, Text, CheckConstraint, Index
from database import Base


class Post(Base):
    """
    A blog post.

    The slug is derived from the title once, when the post is created, and
    is never recomputed afterwards (a title update leaves the slug as it was).
    Slugs are not unique: two titles differing only by punctuation or case
    produce the same slug.
    """
    __tablename__ = 'posts'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    slug = Column(Text, nullable=False)
    body = Column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("slug != ''", name='ck_posts_slug_not_empty'),
        Index('idx_posts_slug', 'slug'),
        # Never hand out an id that belonged to a deleted row
        {'sqlite_autoincrement': True},
    )

    def __repr__(self):
        return f"<Post id={self.id} slug={self.slug!r}>"


# Columns a caller may name in an order clause or an update
POST_COLUMNS = ('id', 'title', 'slug', 'body')
UPDATABLE_COLUMNS = ('title', 'body')


class SimplifiedPost(NamedTuple):
    """Read-only projection of a post: title and body, nothing else."""

    title: str
    body: str
