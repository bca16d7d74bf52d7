import logging

from cliptube.errors import NotFoundError, translate_storage_errors
from cliptube.models import Author, Tag, Video, VideoTag, generate_id, utcnow
from cliptube.services.videos import VideoService

logger = logging.getLogger(__name__)

DUPLICATE_TAG_MESSAGE = "This tag name is already in use"


class TagService:
    """CRUD for tags. Tag names are unique at storage level."""

    def __init__(self, session):
        self.session = session

    def get_tag_row(self, tag_id: str) -> Tag:
        tag = self.session.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError(f"Tag '{tag_id}' not found")
        return tag

    @translate_storage_errors("Failed to list tags")
    def list_tags(self) -> list[dict]:
        return [tag.to_dict() for tag in self.session.query(Tag).all()]

    @translate_storage_errors("Failed to fetch tag")
    def get_tag_by_id(self, tag_id: str) -> dict:
        return self.get_tag_row(tag_id).to_dict()

    @translate_storage_errors("Failed to create tag", unique_message=DUPLICATE_TAG_MESSAGE)
    def create_tag(self, data: dict) -> str:
        now = utcnow()
        tag = Tag(id=generate_id(), name=data["name"], created_at=now, updated_at=now)
        self.session.add(tag)
        self.session.commit()

        logger.info(f"Created tag '{tag.name}' (ID: {tag.id})")
        return tag.id

    @translate_storage_errors("Failed to update tag", unique_message=DUPLICATE_TAG_MESSAGE)
    def update_tag(self, tag_id: str, data: dict) -> None:
        tag = self.get_tag_row(tag_id)
        if "name" in data:
            tag.name = data["name"]
        tag.updated_at = utcnow()
        self.session.commit()

    @translate_storage_errors("Failed to delete tag")
    def delete_tag(self, tag_id: str) -> None:
        """Delete a tag and every video association in one transaction."""
        tag = self.get_tag_row(tag_id)

        removed = self.session.query(VideoTag).filter_by(tag_id=tag_id).delete(synchronize_session=False)
        self.session.delete(tag)
        self.session.commit()

        logger.info(f"Deleted tag '{tag_id}' and {removed} video association(s)")


class TagRelationsService:
    def __init__(self, session, tag_service: TagService, video_service: VideoService):
        self.session = session
        self.tags = tag_service
        self.videos = video_service

    @translate_storage_errors("Failed to fetch tag with videos")
    def get_tag_with_videos_by_id(self, tag_id: str) -> dict:
        tag = self.tags.get_tag_by_id(tag_id)

        rows = (
            self.session.query(Video, Author)
            .join(VideoTag, VideoTag.video_id == Video.id)
            .join(Author, Video.author_id == Author.id)
            .filter(VideoTag.tag_id == tag_id)
            .all()
        )
        tag["videos"] = [self.videos.describe_video(video, author) for video, author in rows]
        return tag

    @translate_storage_errors("Failed to list tags with videos")
    def list_tags_with_videos(self) -> list[dict]:
        return [self.get_tag_with_videos_by_id(tag["id"]) for tag in self.tags.list_tags()]


class TagSearchService:
    """Set algebra over the video/tag junction. Results are video ids."""

    def __init__(self, session):
        self.session = session

    def _video_ids_for_tag(self, tag_id: str) -> list[str]:
        rows = self.session.query(VideoTag.video_id).filter(VideoTag.tag_id == tag_id).all()
        return [video_id for (video_id,) in rows]

    @translate_storage_errors("Failed to search videos by any tag")
    def get_videos_by_tag_ids(self, tag_ids: list[str]) -> list[str]:
        """Union: ids of videos carrying at least one of ``tag_ids``."""
        unique_ids = list(dict.fromkeys(tag_ids))
        if not unique_ids:
            return []

        rows = (
            self.session.query(VideoTag.video_id)
            .filter(VideoTag.tag_id.in_(unique_ids))
            .all()
        )
        return list(dict.fromkeys(video_id for (video_id,) in rows))

    @translate_storage_errors("Failed to search videos by all tags")
    def get_videos_by_all_tags(self, tag_ids: list[str]) -> list[str]:
        """Intersection: ids of videos carrying every one of ``tag_ids``."""
        unique_ids = list(dict.fromkeys(tag_ids))
        if not unique_ids:
            return []

        first, *rest = [self._video_ids_for_tag(tag_id) for tag_id in unique_ids]
        common = set(first)
        for video_ids in rest:
            common &= set(video_ids)
        return [video_id for video_id in first if video_id in common]
