"""
Bookmark services for videos and playlists.

Both bookmark kinds share the same rules, implemented once in
``BookmarkLedger`` and held by the two public services:

* ``has_bookmarked`` never fails, it answers ``False`` for unknown ids.
* ``create_bookmark`` is idempotent: an existing (author, target) pair is
  returned unchanged.  When two requests race past the existence check, the
  loser's unique-constraint violation is resolved by re-reading the winner's
  row, so both code paths return the same record.
* ``delete_bookmark`` is not idempotent and raises ``NotFoundError`` when the
  pair does not exist.
"""
import logging

from sqlalchemy.exc import IntegrityError

from cliptube.errors import DatabaseError, NotFoundError, is_unique_violation, translate_storage_errors
from cliptube.models import Author, Playlist, PlaylistBookmark, Video, VideoBookmark, generate_id, utcnow
from cliptube.services.playlists import PlaylistRelationsService
from cliptube.services.videos import VideoService

logger = logging.getLogger(__name__)


class BookmarkLedger:
    """Rows of one bookmark table, keyed by (author_id, <target>_id)."""

    def __init__(self, session, bookmark_model, target_model, target_field: str, target_label: str):
        self.session = session
        self.bookmark_model = bookmark_model
        self.target_model = target_model
        self.target_field = target_field
        self.target_label = target_label

    def find(self, author_id: str, target_id: str):
        return (
            self.session.query(self.bookmark_model)
            .filter_by(author_id=author_id, **{self.target_field: target_id})
            .first()
        )

    def require_author(self, author_id: str) -> None:
        if self.session.get(Author, author_id) is None:
            raise NotFoundError(f"Author '{author_id}' not found")

    def require_target(self, target_id: str) -> None:
        if self.session.get(self.target_model, target_id) is None:
            raise NotFoundError(f"{self.target_label} '{target_id}' not found")

    def target_ids_for_author(self, author_id: str) -> list[str]:
        """Ids of bookmarked targets whose own author still exists."""
        column = getattr(self.bookmark_model, self.target_field)
        rows = (
            self.session.query(column)
            .join(self.target_model, self.target_model.id == column)
            .join(Author, self.target_model.author_id == Author.id)
            .filter(self.bookmark_model.author_id == author_id)
            .all()
        )
        return [target_id for (target_id,) in rows]

    def author_ids_for_target(self, target_id: str) -> list[str]:
        column = getattr(self.bookmark_model, self.target_field)
        rows = (
            self.session.query(self.bookmark_model.author_id)
            .filter(column == target_id)
            .all()
        )
        return [author_id for (author_id,) in rows]

    def create(self, author_id: str, target_id: str) -> dict:
        self.require_author(author_id)
        self.require_target(target_id)

        existing = self.find(author_id, target_id)
        if existing is not None:
            return existing.to_dict()

        now = utcnow()
        bookmark = self.bookmark_model(
            id=generate_id(),
            author_id=author_id,
            created_at=now,
            updated_at=now,
            **{self.target_field: target_id},
        )
        self.session.add(bookmark)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if not is_unique_violation(e):
                raise
            winner = self.find(author_id, target_id)
            if winner is None:
                raise DatabaseError(
                    f"Bookmark of {self.target_label.lower()} '{target_id}' collided but could not be re-read"
                ) from e
            return winner.to_dict()

        logger.info(f"Author '{author_id}' bookmarked {self.target_label.lower()} '{target_id}'")
        return bookmark.to_dict()

    def delete(self, author_id: str, target_id: str) -> None:
        bookmark = self.find(author_id, target_id)
        if bookmark is None:
            raise NotFoundError(
                f"No bookmark of {self.target_label.lower()} '{target_id}' by author '{author_id}'"
            )
        self.session.delete(bookmark)
        self.session.commit()


class VideoBookmarkService:
    def __init__(self, session, video_service: VideoService):
        self.session = session
        self.videos = video_service
        self.ledger = BookmarkLedger(session, VideoBookmark, Video, "video_id", "Video")

    @translate_storage_errors("Failed to list bookmarked videos")
    def get_bookmarks_by_author_id(self, author_id: str) -> list[dict]:
        self.ledger.require_author(author_id)
        return [self.videos.get_video_by_id(video_id) for video_id in self.ledger.target_ids_for_author(author_id)]

    @translate_storage_errors("Failed to list authors bookmarking video")
    def get_authors_by_bookmarked_video_id(self, video_id: str) -> list[str]:
        self.ledger.require_target(video_id)
        return self.ledger.author_ids_for_target(video_id)

    @translate_storage_errors("Failed to bookmark video")
    def create_bookmark(self, author_id: str, video_id: str) -> dict:
        return self.ledger.create(author_id, video_id)

    @translate_storage_errors("Failed to remove video bookmark")
    def delete_bookmark(self, author_id: str, video_id: str) -> None:
        self.ledger.delete(author_id, video_id)

    @translate_storage_errors("Failed to check video bookmark")
    def has_bookmarked(self, author_id: str, video_id: str) -> bool:
        return self.ledger.find(author_id, video_id) is not None


class PlaylistBookmarkService:
    def __init__(self, session, playlist_relations: PlaylistRelationsService):
        self.session = session
        self.playlists = playlist_relations
        self.ledger = BookmarkLedger(session, PlaylistBookmark, Playlist, "playlist_id", "Playlist")

    @translate_storage_errors("Failed to list bookmarked playlists")
    def get_bookmarks_by_author_id(self, author_id: str) -> list[dict]:
        self.ledger.require_author(author_id)
        return [
            self.playlists.get_playlist_with_videos_by_id(playlist_id)
            for playlist_id in self.ledger.target_ids_for_author(author_id)
        ]

    @translate_storage_errors("Failed to list authors bookmarking playlist")
    def get_authors_by_bookmarked_playlist_id(self, playlist_id: str) -> list[str]:
        self.ledger.require_target(playlist_id)
        return self.ledger.author_ids_for_target(playlist_id)

    @translate_storage_errors("Failed to bookmark playlist")
    def create_bookmark(self, author_id: str, playlist_id: str) -> dict:
        return self.ledger.create(author_id, playlist_id)

    @translate_storage_errors("Failed to remove playlist bookmark")
    def delete_bookmark(self, author_id: str, playlist_id: str) -> None:
        self.ledger.delete(author_id, playlist_id)

    @translate_storage_errors("Failed to check playlist bookmark")
    def has_bookmarked(self, author_id: str, playlist_id: str) -> bool:
        return self.ledger.find(author_id, playlist_id) is not None
