import logging

from cliptube.errors import NotFoundError, translate_storage_errors
from cliptube.models import Author, Follow, Playlist, Video, generate_id, utcnow
from cliptube.services.bookmarks import PlaylistBookmarkService, VideoBookmarkService
from cliptube.services.playlists import PlaylistRelationsService, PlaylistService
from cliptube.services.videos import VideoService

logger = logging.getLogger(__name__)

AUTHOR_FIELDS = ("name", "icon_url", "bio")


class AuthorService:
    """CRUD for authors."""

    def __init__(self, session):
        self.session = session

    def get_author_row(self, author_id: str) -> Author:
        author = self.session.get(Author, author_id)
        if author is None:
            raise NotFoundError(f"Author '{author_id}' not found")
        return author

    @translate_storage_errors("Failed to list authors")
    def list_authors(self) -> list[dict]:
        return [author.to_dict() for author in self.session.query(Author).all()]

    @translate_storage_errors("Failed to fetch author")
    def get_author_by_id(self, author_id: str) -> dict:
        return self.get_author_row(author_id).to_dict()

    @translate_storage_errors("Failed to create author", unique_message="This author id is already in use")
    def create_author(self, data: dict) -> str:
        now = utcnow()
        author = Author(
            id=generate_id(),
            name=data["name"],
            icon_url=data["icon_url"],
            bio=data.get("bio"),
            created_at=now,
            updated_at=now,
        )
        self.session.add(author)
        self.session.commit()

        logger.info(f"Created author '{author.name}' (ID: {author.id})")
        return author.id

    @translate_storage_errors("Failed to update author")
    def update_author(self, author_id: str, data: dict) -> None:
        author = self.get_author_row(author_id)
        for field in AUTHOR_FIELDS:
            if field in data:
                setattr(author, field, data[field])
        author.updated_at = utcnow()
        self.session.commit()

    @translate_storage_errors("Failed to delete author")
    def delete_author(self, author_id: str) -> None:
        """Delete an author.

        Follow edges and bookmarks go with it through storage cascades.
        Videos and playlists keep their dangling ``author_id`` and drop out
        of every author-joined read.
        """
        author = self.get_author_row(author_id)
        self.session.delete(author)
        self.session.commit()

        logger.info(f"Deleted author '{author_id}'")


class AuthorRelationsService:
    """An author together with the videos and playlists they published."""

    def __init__(
        self,
        session,
        author_service: AuthorService,
        video_service: VideoService,
        playlist_service: PlaylistService,
        playlist_relations: PlaylistRelationsService,
    ):
        self.session = session
        self.authors = author_service
        self.videos = video_service
        self.playlists = playlist_service
        self.playlist_relations = playlist_relations

    def _playlists_with_videos(self, author_id: str) -> list[dict]:
        return [
            self.playlist_relations.get_playlist_with_videos_by_id(playlist_id)
            for playlist_id in self.playlists.list_playlist_ids_by_author(author_id)
        ]

    @translate_storage_errors("Failed to fetch author with videos")
    def get_author_with_videos(self, author_id: str) -> dict:
        author = self.authors.get_author_by_id(author_id)
        author["videos"] = self.videos.list_videos_by_author(author_id)
        return author

    @translate_storage_errors("Failed to fetch author with playlists")
    def get_author_with_playlists(self, author_id: str) -> dict:
        author = self.authors.get_author_by_id(author_id)
        author["playlists"] = self._playlists_with_videos(author_id)
        return author

    @translate_storage_errors("Failed to fetch author with videos and playlists")
    def get_author_with_videos_and_playlists(self, author_id: str) -> dict:
        author = self.authors.get_author_by_id(author_id)
        author["videos"] = self.videos.list_videos_by_author(author_id)
        author["playlists"] = self._playlists_with_videos(author_id)
        return author


class AuthorCountsService:
    """Follower, video and playlist counters.

    Each counter is its own query per author.  Fine for small listings; a
    grouped aggregate would be the way to scale ``list_authors_with_counts``.
    """

    def __init__(self, session, author_service: AuthorService):
        self.session = session
        self.authors = author_service

    def count_followers(self, author_id: str) -> int:
        return self.session.query(Follow).filter(Follow.following_id == author_id).count()

    def count_videos(self, author_id: str) -> int:
        return self.session.query(Video).filter(Video.author_id == author_id).count()

    def count_playlists(self, author_id: str) -> int:
        return self.session.query(Playlist).filter(Playlist.author_id == author_id).count()

    def attach_counts(self, author: dict) -> dict:
        author["follower_count"] = self.count_followers(author["id"])
        author["video_count"] = self.count_videos(author["id"])
        author["playlist_count"] = self.count_playlists(author["id"])
        return author

    @translate_storage_errors("Failed to fetch author with counts")
    def get_author_with_counts(self, author_id: str) -> dict:
        return self.attach_counts(self.authors.get_author_by_id(author_id))

    @translate_storage_errors("Failed to list authors with counts")
    def list_authors_with_counts(self) -> list[dict]:
        return [self.attach_counts(author) for author in self.authors.list_authors()]


class AuthorBookmarksService:
    """Bookmark operations seen from the bookmarking author."""

    def __init__(
        self,
        author_service: AuthorService,
        video_bookmarks: VideoBookmarkService,
        playlist_bookmarks: PlaylistBookmarkService,
    ):
        self.authors = author_service
        self.video_bookmarks = video_bookmarks
        self.playlist_bookmarks = playlist_bookmarks

    def get_author_with_bookmarked_videos(self, author_id: str) -> dict:
        author = self.authors.get_author_by_id(author_id)
        author["bookmarked_videos"] = self.video_bookmarks.get_bookmarks_by_author_id(author_id)
        return author

    def get_author_with_bookmarked_playlists(self, author_id: str) -> dict:
        author = self.authors.get_author_by_id(author_id)
        author["bookmarked_playlists"] = self.playlist_bookmarks.get_bookmarks_by_author_id(author_id)
        return author

    def bookmark_video(self, author_id: str, video_id: str) -> dict:
        return self.video_bookmarks.create_bookmark(author_id, video_id)

    def unbookmark_video(self, author_id: str, video_id: str) -> None:
        self.authors.get_author_by_id(author_id)
        self.video_bookmarks.delete_bookmark(author_id, video_id)

    def bookmark_playlist(self, author_id: str, playlist_id: str) -> dict:
        return self.playlist_bookmarks.create_bookmark(author_id, playlist_id)

    def unbookmark_playlist(self, author_id: str, playlist_id: str) -> None:
        self.authors.get_author_by_id(author_id)
        self.playlist_bookmarks.delete_bookmark(author_id, playlist_id)
