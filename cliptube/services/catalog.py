from cliptube.errors import translate_storage_errors
from cliptube.services.authors import AuthorBookmarksService, AuthorCountsService, AuthorRelationsService


class CatalogService:
    """Composite author views stitched together from the narrower services.

    Nothing is isolated here: the author lookup short-circuits with
    ``NotFoundError`` and any other failure propagates to the caller.
    """

    def __init__(
        self,
        session,
        author_relations: AuthorRelationsService,
        author_bookmarks: AuthorBookmarksService,
        author_counts: AuthorCountsService,
    ):
        self.session = session
        self.relations = author_relations
        self.bookmarks = author_bookmarks
        self.counts = author_counts

    @translate_storage_errors("Failed to fetch author with videos, playlists and bookmarks")
    def get_author_with_videos_playlists_and_bookmarks(self, author_id: str) -> dict:
        author = self.relations.get_author_with_videos_and_playlists(author_id)
        author["bookmarked_videos"] = self.bookmarks.video_bookmarks.get_bookmarks_by_author_id(author_id)
        author["bookmarked_playlists"] = self.bookmarks.playlist_bookmarks.get_bookmarks_by_author_id(author_id)
        return author

    @translate_storage_errors("Failed to fetch author with videos, playlists and counts")
    def get_author_with_videos_playlists_and_counts(self, author_id: str) -> dict:
        author = self.relations.get_author_with_videos_and_playlists(author_id)
        return self.counts.attach_counts(author)
