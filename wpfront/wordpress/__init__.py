"""WordPress REST API access: models, read client, and publishing client."""

from .client import ContentClient, WordPressAPIError
from .embedded import featured_image_url, post_author, post_categories, post_tags
from .models import (
    Author,
    Category,
    Embedded,
    Media,
    MediaDetails,
    MediaSize,
    Post,
    PostStatus,
    PublishedPost,
    Rendered,
    Term,
)
from .publish import PublishClient, basic_auth_header

__all__ = [
    "Author",
    "Category",
    "ContentClient",
    "Embedded",
    "Media",
    "MediaDetails",
    "MediaSize",
    "Post",
    "PostStatus",
    "PublishClient",
    "PublishedPost",
    "Rendered",
    "Term",
    "WordPressAPIError",
    "basic_auth_header",
    "featured_image_url",
    "post_author",
    "post_categories",
    "post_tags",
]
