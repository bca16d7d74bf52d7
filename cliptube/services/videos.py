import logging

from cliptube.errors import NotFoundError, ValidationError, translate_storage_errors
from cliptube.models import Author, Tag, Video, VideoTag, PlaylistVideo, generate_id, utcnow

logger = logging.getLogger(__name__)

VIDEO_FIELDS = ("title", "url", "start", "end", "author_id")


class VideoService:
    """CRUD for clipped videos, always read back with their author and tags."""

    def __init__(self, session):
        self.session = session

    def get_video_row(self, video_id: str) -> Video:
        """Fetch the bare video row, without author or tags."""
        video = self.session.get(Video, video_id)
        if video is None:
            raise NotFoundError(f"Video '{video_id}' not found")
        return video

    def get_video_tags(self, video_id: str) -> list[dict]:
        tags = (
            self.session.query(Tag)
            .join(VideoTag, VideoTag.tag_id == Tag.id)
            .filter(VideoTag.video_id == video_id)
            .all()
        )
        return [tag.to_dict() for tag in tags]

    def describe_video(self, video: Video, author: Author) -> dict:
        """Shape a video row into the payload used by every aggregate view."""
        payload = video.to_dict()
        payload["author"] = author.to_dict()
        payload["tags"] = self.get_video_tags(video.id)
        return payload

    @translate_storage_errors("Failed to list videos")
    def list_videos(self) -> list[dict]:
        rows = (
            self.session.query(Video, Author)
            .join(Author, Video.author_id == Author.id)
            .all()
        )
        return [self.describe_video(video, author) for video, author in rows]

    @translate_storage_errors("Failed to fetch video")
    def get_video_by_id(self, video_id: str) -> dict:
        row = (
            self.session.query(Video, Author)
            .join(Author, Video.author_id == Author.id)
            .filter(Video.id == video_id)
            .first()
        )
        if row is None:
            raise NotFoundError(f"Video '{video_id}' not found")
        video, author = row
        return self.describe_video(video, author)

    @translate_storage_errors("Failed to list author videos")
    def list_videos_by_author(self, author_id: str) -> list[dict]:
        video_ids = [
            video_id for (video_id,) in
            self.session.query(Video.id).filter(Video.author_id == author_id).all()
        ]
        return [self.get_video_by_id(video_id) for video_id in video_ids]

    def _require_author(self, author_id: str | None) -> None:
        if not author_id or self.session.get(Author, author_id) is None:
            raise NotFoundError(f"Author '{author_id}' not found")

    @staticmethod
    def _check_bounds(start: int | None, end: int | None) -> None:
        if start is not None and end is not None and end <= start:
            raise ValidationError(f"Clip end ({end}) must be greater than its start ({start})")

    def add_video(self, data: dict) -> Video:
        """Stage a new video in the session without committing it."""
        # author_id is not a foreign key, the check lives here
        self._require_author(data["author_id"])
        self._check_bounds(data["start"], data["end"])

        now = utcnow()
        video = Video(
            id=generate_id(),
            title=data["title"],
            url=data["url"],
            start=data["start"],
            end=data["end"],
            author_id=data["author_id"],
            created_at=now,
            updated_at=now,
        )
        self.session.add(video)
        return video

    @translate_storage_errors("Failed to create video", unique_message="This video id is already in use")
    def create_video(self, data: dict) -> str:
        video = self.add_video(data)
        self.session.commit()

        logger.info(f"Created video '{video.title}' (ID: {video.id})")
        return video.id

    @translate_storage_errors("Failed to update video")
    def update_video(self, video_id: str, data: dict) -> None:
        video = self.get_video_row(video_id)
        if "author_id" in data:
            self._require_author(data["author_id"])
        self._check_bounds(data.get("start", video.start), data.get("end", video.end))

        for field in VIDEO_FIELDS:
            if field in data:
                setattr(video, field, data[field])
        video.updated_at = utcnow()
        self.session.commit()

    @translate_storage_errors("Failed to delete video")
    def delete_video(self, video_id: str) -> None:
        video = self.get_video_row(video_id)

        self.session.query(VideoTag).filter_by(video_id=video_id).delete(synchronize_session=False)
        self.session.query(PlaylistVideo).filter_by(video_id=video_id).delete(synchronize_session=False)
        self.session.delete(video)
        self.session.commit()

        logger.info(f"Deleted video '{video_id}'")


class VideoTagsService:
    """Tag assignment for videos, layered on top of ``VideoService``."""

    def __init__(self, session, video_service: VideoService):
        self.session = session
        self.videos = video_service

    def _unique_existing_tag_ids(self, tag_ids: list[str]) -> list[str]:
        unique_ids = list(dict.fromkeys(tag_ids))
        for tag_id in unique_ids:
            if self.session.get(Tag, tag_id) is None:
                raise NotFoundError(f"Tag '{tag_id}' not found")
        return unique_ids

    def _attach_tags(self, video_id: str, tag_ids: list[str]) -> None:
        now = utcnow()
        for tag_id in tag_ids:
            self.session.add(VideoTag(video_id=video_id, tag_id=tag_id, created_at=now, updated_at=now))

    @translate_storage_errors("Failed to search videos by tags")
    def get_videos_by_tags(self, tag_ids: list[str]) -> list[dict]:
        """Videos carrying any of ``tag_ids``.

        An empty ``tag_ids`` means no filter and returns every video, unlike
        the tag search service where an empty input yields nothing.
        """
        unique_ids = list(dict.fromkeys(tag_ids))
        if not unique_ids:
            return self.videos.list_videos()

        rows = (
            self.session.query(VideoTag.video_id)
            .filter(VideoTag.tag_id.in_(unique_ids))
            .all()
        )
        matching = {video_id for (video_id,) in rows}
        if not matching:
            return []
        return [video for video in self.videos.list_videos() if video["id"] in matching]

    @translate_storage_errors("Failed to create video with tags")
    def create_video_with_tags(self, data: dict, tag_ids: list[str] | None = None) -> str:
        # Validate tags up front so a bad tag id leaves no video behind
        unique_ids = self._unique_existing_tag_ids(tag_ids or [])
        video = self.videos.add_video(data)
        self._attach_tags(video.id, unique_ids)
        self.session.commit()

        logger.info(f"Created video '{video.title}' (ID: {video.id}) with {len(unique_ids)} tags")
        return video.id

    @translate_storage_errors("Failed to update video tags")
    def update_video_tags(self, video_id: str, tag_ids: list[str]) -> None:
        """Replace the whole tag set of a video."""
        video = self.videos.get_video_row(video_id)
        unique_ids = self._unique_existing_tag_ids(tag_ids or [])

        self.session.query(VideoTag).filter_by(video_id=video_id).delete(synchronize_session=False)
        self._attach_tags(video_id, unique_ids)
        video.updated_at = utcnow()
        self.session.commit()

    @translate_storage_errors("Failed to remove tag from video")
    def remove_tag_from_video(self, video_id: str, tag_id: str) -> None:
        self.videos.get_video_row(video_id)
        if self.session.get(Tag, tag_id) is None:
            raise NotFoundError(f"Tag '{tag_id}' not found")

        self.session.query(VideoTag).filter_by(video_id=video_id, tag_id=tag_id).delete(synchronize_session=False)
        self.session.commit()
