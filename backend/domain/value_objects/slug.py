"""
Slug Value Object

URL-safe identifier derived from a post title.
"""


def slugify(title: str) -> str:
    """
    Derive a slug from a title.

    Every space becomes a hyphen, then the whole string is lowercased.
    Nothing else is normalized: punctuation, tabs and non-ASCII characters
    pass through untouched, so "Hello, World" and "Hello World" do not
    collide but "Hello World" and "hello world" do.

    Args:
        title: Post title

    Returns:
        Slug string
    """
    return title.replace(" ", "-").lower()
