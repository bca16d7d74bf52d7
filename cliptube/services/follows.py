import logging

from sqlalchemy.exc import IntegrityError

from cliptube.errors import InvalidOperationError, NotFoundError, is_unique_violation, translate_storage_errors
from cliptube.models import Author, Follow, utcnow

logger = logging.getLogger(__name__)


def _summarize(author: Author) -> dict:
    return {"id": author.id, "name": author.name, "icon_url": author.icon_url}


class FollowService:
    """Directed follow edges between authors."""

    def __init__(self, session):
        self.session = session

    def _require_author(self, author_id: str) -> Author:
        author = self.session.get(Author, author_id)
        if author is None:
            raise NotFoundError(f"Author '{author_id}' not found")
        return author

    def _find_edge(self, follower_id: str, following_id: str) -> Follow | None:
        return (
            self.session.query(Follow)
            .filter_by(follower_id=follower_id, following_id=following_id)
            .first()
        )

    @translate_storage_errors("Failed to follow author")
    def follow_user(self, follower_id: str, following_id: str) -> None:
        """Create the edge. Following someone already followed is a no-op."""
        if follower_id == following_id:
            raise InvalidOperationError("Authors cannot follow themselves")

        self._require_author(follower_id)
        self._require_author(following_id)
        if self._find_edge(follower_id, following_id) is not None:
            return

        now = utcnow()
        self.session.add(Follow(
            follower_id=follower_id,
            following_id=following_id,
            created_at=now,
            updated_at=now,
        ))
        try:
            self.session.commit()
        except IntegrityError as e:
            # A concurrent request created the same edge first
            self.session.rollback()
            if not is_unique_violation(e):
                raise
            return

        logger.info(f"Author '{follower_id}' now follows '{following_id}'")

    @translate_storage_errors("Failed to unfollow author")
    def unfollow_user(self, follower_id: str, following_id: str) -> None:
        edge = self._find_edge(follower_id, following_id)
        if edge is None:
            raise NotFoundError(f"Author '{follower_id}' does not follow '{following_id}'")

        self.session.delete(edge)
        self.session.commit()

    @translate_storage_errors("Failed to list followers")
    def get_followers(self, author_id: str) -> list[dict]:
        self._require_author(author_id)
        followers = (
            self.session.query(Author)
            .join(Follow, Follow.follower_id == Author.id)
            .filter(Follow.following_id == author_id)
            .all()
        )
        return [_summarize(author) for author in followers]

    @translate_storage_errors("Failed to list followed authors")
    def get_following(self, author_id: str) -> list[dict]:
        self._require_author(author_id)
        following = (
            self.session.query(Author)
            .join(Follow, Follow.following_id == Author.id)
            .filter(Follow.follower_id == author_id)
            .all()
        )
        return [_summarize(author) for author in following]

    @translate_storage_errors("Failed to check follow status")
    def is_following(self, follower_id: str, following_id: str) -> bool:
        return self._find_edge(follower_id, following_id) is not None
