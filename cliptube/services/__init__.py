"""
Service layer of ClipTube.

Services never inherit from each other.  Each one receives the narrower
services it builds on through its constructor, and ``build_services`` wires
the whole graph for a single session.
"""
from dataclasses import dataclass

from cliptube.models import db
from cliptube.services.authors import (
    AuthorBookmarksService,
    AuthorCountsService,
    AuthorRelationsService,
    AuthorService,
)
from cliptube.services.bookmarks import PlaylistBookmarkService, VideoBookmarkService
from cliptube.services.catalog import CatalogService
from cliptube.services.follows import FollowService
from cliptube.services.playlists import PlaylistRelationsService, PlaylistService, PlaylistVideosService
from cliptube.services.tags import TagRelationsService, TagSearchService, TagService
from cliptube.services.videos import VideoService, VideoTagsService


@dataclass
class Services:
    authors: AuthorService
    videos: VideoService
    video_tags: VideoTagsService
    playlists: PlaylistService
    playlist_relations: PlaylistRelationsService
    playlist_videos: PlaylistVideosService
    tags: TagService
    tag_relations: TagRelationsService
    tag_search: TagSearchService
    follows: FollowService
    video_bookmarks: VideoBookmarkService
    playlist_bookmarks: PlaylistBookmarkService
    author_relations: AuthorRelationsService
    author_counts: AuthorCountsService
    author_bookmarks: AuthorBookmarksService
    catalog: CatalogService


def build_services(session=None) -> Services:
    """Wire every service around ``session`` (the Flask-SQLAlchemy session by default)."""
    if session is None:
        session = db.session

    authors = AuthorService(session)
    videos = VideoService(session)
    playlists = PlaylistService(session)
    tags = TagService(session)

    playlist_relations = PlaylistRelationsService(session, playlists, videos)
    video_bookmarks = VideoBookmarkService(session, videos)
    playlist_bookmarks = PlaylistBookmarkService(session, playlist_relations)

    author_relations = AuthorRelationsService(session, authors, videos, playlists, playlist_relations)
    author_counts = AuthorCountsService(session, authors)
    author_bookmarks = AuthorBookmarksService(authors, video_bookmarks, playlist_bookmarks)

    return Services(
        authors=authors,
        videos=videos,
        video_tags=VideoTagsService(session, videos),
        playlists=playlists,
        playlist_relations=playlist_relations,
        playlist_videos=PlaylistVideosService(session, playlists),
        tags=tags,
        tag_relations=TagRelationsService(session, tags, videos),
        tag_search=TagSearchService(session),
        follows=FollowService(session),
        video_bookmarks=video_bookmarks,
        playlist_bookmarks=playlist_bookmarks,
        author_relations=author_relations,
        author_counts=author_counts,
        author_bookmarks=author_bookmarks,
        catalog=CatalogService(session, author_relations, author_bookmarks, author_counts),
    )
