import logging

from cliptube.errors import NotFoundError, translate_storage_errors
from cliptube.models import Author, Playlist, PlaylistVideo, Video, generate_id, utcnow
from cliptube.services.videos import VideoService

logger = logging.getLogger(__name__)


class PlaylistService:
    """CRUD for playlists, read back joined with their author."""

    def __init__(self, session):
        self.session = session

    @staticmethod
    def describe_playlist(playlist: Playlist, author: Author) -> dict:
        payload = playlist.to_dict()
        payload["author"] = author.to_dict()
        return payload

    def get_playlist_row(self, playlist_id: str) -> Playlist:
        playlist = self.session.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFoundError(f"Playlist '{playlist_id}' not found")
        return playlist

    @translate_storage_errors("Failed to list playlists")
    def list_playlists(self) -> list[dict]:
        rows = (
            self.session.query(Playlist, Author)
            .join(Author, Playlist.author_id == Author.id)
            .all()
        )
        return [self.describe_playlist(playlist, author) for playlist, author in rows]

    @translate_storage_errors("Failed to fetch playlist")
    def get_playlist_by_id(self, playlist_id: str) -> dict:
        row = (
            self.session.query(Playlist, Author)
            .join(Author, Playlist.author_id == Author.id)
            .filter(Playlist.id == playlist_id)
            .first()
        )
        if row is None:
            raise NotFoundError(f"Playlist '{playlist_id}' not found")
        return self.describe_playlist(*row)

    def list_playlist_ids_by_author(self, author_id: str) -> list[str]:
        return [
            playlist_id for (playlist_id,) in
            self.session.query(Playlist.id).filter(Playlist.author_id == author_id).all()
        ]

    def _require_author(self, author_id: str | None) -> None:
        if not author_id or self.session.get(Author, author_id) is None:
            raise NotFoundError(f"Author '{author_id}' not found")

    @translate_storage_errors("Failed to create playlist", unique_message="This playlist id is already in use")
    def create_playlist(self, data: dict) -> str:
        self._require_author(data["author_id"])

        now = utcnow()
        playlist = Playlist(
            id=generate_id(),
            title=data["title"],
            author_id=data["author_id"],
            created_at=now,
            updated_at=now,
        )
        self.session.add(playlist)
        self.session.commit()

        logger.info(f"Created playlist '{playlist.title}' (ID: {playlist.id})")
        return playlist.id

    @translate_storage_errors("Failed to update playlist")
    def update_playlist(self, playlist_id: str, data: dict) -> None:
        playlist = self.get_playlist_row(playlist_id)
        if "author_id" in data:
            self._require_author(data["author_id"])

        for field in ("title", "author_id"):
            if field in data:
                setattr(playlist, field, data[field])
        playlist.updated_at = utcnow()
        self.session.commit()

    @translate_storage_errors("Failed to delete playlist")
    def delete_playlist(self, playlist_id: str) -> None:
        playlist = self.get_playlist_row(playlist_id)

        self.session.query(PlaylistVideo).filter_by(playlist_id=playlist_id).delete(synchronize_session=False)
        self.session.delete(playlist)
        self.session.commit()

        logger.info(f"Deleted playlist '{playlist_id}'")


class PlaylistRelationsService:
    """Playlists together with their ordered, fully described videos."""

    def __init__(self, session, playlist_service: PlaylistService, video_service: VideoService):
        self.session = session
        self.playlists = playlist_service
        self.videos = video_service

    @translate_storage_errors("Failed to fetch playlist with videos")
    def get_playlist_with_videos_by_id(self, playlist_id: str) -> dict:
        playlist = self.playlists.get_playlist_by_id(playlist_id)

        # Ascending by order only; ties keep storage iteration order
        rows = (
            self.session.query(PlaylistVideo, Video, Author)
            .join(Video, PlaylistVideo.video_id == Video.id)
            .join(Author, Video.author_id == Author.id)
            .filter(PlaylistVideo.playlist_id == playlist_id)
            .order_by(PlaylistVideo.order)
            .all()
        )

        videos = []
        for entry, video, author in rows:
            payload = self.videos.describe_video(video, author)
            payload["order"] = entry.order
            videos.append(payload)

        playlist["videos"] = videos
        return playlist

    @translate_storage_errors("Failed to list playlists with videos")
    def get_all_playlists_with_videos(self) -> list[dict]:
        results = []
        for playlist in self.playlists.list_playlists():
            try:
                results.append(self.get_playlist_with_videos_by_id(playlist["id"]))
            except Exception as e:
                logger.error(f"Failed to load videos of playlist '{playlist['id']}': {e}")
                results.append({**playlist, "videos": []})
        return results


class PlaylistVideosService:
    """Membership and ordering of videos inside a playlist."""

    def __init__(self, session, playlist_service: PlaylistService):
        self.session = session
        self.playlists = playlist_service

    def _require_video(self, video_id: str) -> None:
        if self.session.get(Video, video_id) is None:
            raise NotFoundError(f"Video '{video_id}' not found")

    @translate_storage_errors(
        "Failed to add video to playlist",
        unique_message="This video is already in the playlist",
    )
    def add_video_to_playlist(self, playlist_id: str, video_id: str, order: int) -> None:
        self.playlists.get_playlist_row(playlist_id)
        self._require_video(video_id)

        now = utcnow()
        self.session.add(PlaylistVideo(
            id=generate_id(),
            playlist_id=playlist_id,
            video_id=video_id,
            order=order,
            created_at=now,
            updated_at=now,
        ))
        self.session.commit()

    @translate_storage_errors("Failed to update playlist entry")
    def update_playlist_video(self, playlist_id: str, video_id: str, order: int) -> None:
        self.playlists.get_playlist_row(playlist_id)
        self._require_video(video_id)

        entry = (
            self.session.query(PlaylistVideo)
            .filter_by(playlist_id=playlist_id, video_id=video_id)
            .first()
        )
        if entry is None:
            raise NotFoundError(f"Playlist '{playlist_id}' does not contain video '{video_id}'")

        entry.order = order
        entry.updated_at = utcnow()
        self.session.commit()

    @translate_storage_errors("Failed to remove video from playlist")
    def remove_video_from_playlist(self, playlist_id: str, video_id: str) -> None:
        self.playlists.get_playlist_row(playlist_id)
        self._require_video(video_id)

        self.session.query(PlaylistVideo).filter_by(
            playlist_id=playlist_id,
            video_id=video_id,
        ).delete(synchronize_session=False)
        self.session.commit()
