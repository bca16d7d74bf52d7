"""
Tests for video and playlist bookmarks.
"""
from unittest.mock import patch

import pytest

from cliptube.errors import NotFoundError
from cliptube.models import PlaylistBookmark, VideoBookmark, db


class TestVideoBookmarks:
    """Tests for the video bookmark service."""

    def test_create_is_idempotent(self, services, sample_author, sample_video):
        """Bookmarking twice returns the same record and stores one row."""
        first = services.video_bookmarks.create_bookmark(sample_author, sample_video)
        second = services.video_bookmarks.create_bookmark(sample_author, sample_video)

        assert first == second
        assert first["author_id"] == sample_author
        assert first["video_id"] == sample_video
        assert db.session.query(VideoBookmark).count() == 1

    def test_delete_is_not_idempotent(self, services, sample_author, sample_video):
        """The second delete of the same bookmark raises NotFoundError."""
        services.video_bookmarks.create_bookmark(sample_author, sample_video)

        services.video_bookmarks.delete_bookmark(sample_author, sample_video)
        with pytest.raises(NotFoundError):
            services.video_bookmarks.delete_bookmark(sample_author, sample_video)

    def test_has_bookmarked(self, services, sample_author, sample_video):
        assert services.video_bookmarks.has_bookmarked(sample_author, sample_video) is False

        services.video_bookmarks.create_bookmark(sample_author, sample_video)

        assert services.video_bookmarks.has_bookmarked(sample_author, sample_video) is True

    def test_has_bookmarked_unknown_ids(self, services):
        """Unknown ids answer False instead of raising."""
        assert services.video_bookmarks.has_bookmarked("ghost", "nothing") is False

    def test_create_missing_endpoints(self, services, sample_author, sample_video):
        with pytest.raises(NotFoundError):
            services.video_bookmarks.create_bookmark("missing", sample_video)
        with pytest.raises(NotFoundError):
            services.video_bookmarks.create_bookmark(sample_author, "missing")

        assert db.session.query(VideoBookmark).count() == 0

    def test_concurrent_create_returns_winner(self, services, sample_author, sample_video):
        """Losing the race on the unique key returns the row that won."""
        winner = services.video_bookmarks.create_bookmark(sample_author, sample_video)

        ledger = services.video_bookmarks.ledger
        real_find = ledger.find
        calls = []

        def find_missing_first(author_id, video_id):
            calls.append(video_id)
            if len(calls) == 1:
                return None
            return real_find(author_id, video_id)

        with patch.object(ledger, "find", side_effect=find_missing_first):
            result = services.video_bookmarks.create_bookmark(sample_author, sample_video)

        assert result == winner
        assert len(calls) == 2
        assert db.session.query(VideoBookmark).count() == 1

    def test_bookmarks_by_author(self, services, make_video, sample_author, other_author):
        """An author's bookmarks are full videos; other authors' are excluded."""
        mine = make_video(other_author)
        theirs = make_video(other_author)
        services.video_bookmarks.create_bookmark(sample_author, mine)
        services.video_bookmarks.create_bookmark(other_author, theirs)

        videos = services.video_bookmarks.get_bookmarks_by_author_id(sample_author)

        assert [video["id"] for video in videos] == [mine]
        assert videos[0]["author"]["name"] == "bob"

    def test_bookmarks_by_missing_author(self, services):
        with pytest.raises(NotFoundError):
            services.video_bookmarks.get_bookmarks_by_author_id("missing")

    def test_authors_by_bookmarked_video(self, services, sample_author, other_author, sample_video):
        services.video_bookmarks.create_bookmark(sample_author, sample_video)
        services.video_bookmarks.create_bookmark(other_author, sample_video)

        author_ids = services.video_bookmarks.get_authors_by_bookmarked_video_id(sample_video)

        assert sorted(author_ids) == sorted([sample_author, other_author])

    def test_authors_by_missing_video(self, services):
        with pytest.raises(NotFoundError):
            services.video_bookmarks.get_authors_by_bookmarked_video_id("missing")

    def test_bookmarks_removed_with_video(self, services, sample_author, sample_video):
        services.video_bookmarks.create_bookmark(sample_author, sample_video)

        services.videos.delete_video(sample_video)

        assert db.session.query(VideoBookmark).count() == 0


class TestPlaylistBookmarks:
    """Tests for the playlist bookmark service."""

    def test_create_is_idempotent(self, services, other_author, sample_playlist):
        first = services.playlist_bookmarks.create_bookmark(other_author, sample_playlist)
        second = services.playlist_bookmarks.create_bookmark(other_author, sample_playlist)

        assert first == second
        assert first["playlist_id"] == sample_playlist
        assert db.session.query(PlaylistBookmark).count() == 1

    def test_delete_is_not_idempotent(self, services, other_author, sample_playlist):
        services.playlist_bookmarks.create_bookmark(other_author, sample_playlist)

        services.playlist_bookmarks.delete_bookmark(other_author, sample_playlist)
        with pytest.raises(NotFoundError):
            services.playlist_bookmarks.delete_bookmark(other_author, sample_playlist)

    def test_has_bookmarked_unknown_ids(self, services):
        assert services.playlist_bookmarks.has_bookmarked("ghost", "nothing") is False

    def test_bookmarks_include_ordered_videos(self, services, make_video, sample_author, other_author, sample_playlist):
        """Bookmarked playlists come back with their ordered videos."""
        late = make_video(sample_author)
        early = make_video(sample_author)
        services.playlist_videos.add_video_to_playlist(sample_playlist, late, 2)
        services.playlist_videos.add_video_to_playlist(sample_playlist, early, 1)
        services.playlist_bookmarks.create_bookmark(other_author, sample_playlist)

        playlists = services.playlist_bookmarks.get_bookmarks_by_author_id(other_author)

        assert [playlist["id"] for playlist in playlists] == [sample_playlist]
        assert [video["id"] for video in playlists[0]["videos"]] == [early, late]

    def test_authors_by_bookmarked_playlist(self, services, other_author, sample_playlist):
        services.playlist_bookmarks.create_bookmark(other_author, sample_playlist)

        assert services.playlist_bookmarks.get_authors_by_bookmarked_playlist_id(sample_playlist) == [other_author]

    def test_create_missing_playlist(self, services, other_author):
        with pytest.raises(NotFoundError):
            services.playlist_bookmarks.create_bookmark(other_author, "missing")


class TestAuthorBookmarks:
    """Tests for bookmark operations seen from the author."""

    def test_bookmark_and_unbookmark_video(self, services, sample_author, sample_video):
        services.author_bookmarks.bookmark_video(sample_author, sample_video)

        author = services.author_bookmarks.get_author_with_bookmarked_videos(sample_author)
        assert author["name"] == "alice"
        assert [video["id"] for video in author["bookmarked_videos"]] == [sample_video]

        services.author_bookmarks.unbookmark_video(sample_author, sample_video)
        author = services.author_bookmarks.get_author_with_bookmarked_videos(sample_author)
        assert author["bookmarked_videos"] == []

    def test_bookmark_and_unbookmark_playlist(self, services, other_author, sample_playlist):
        services.author_bookmarks.bookmark_playlist(other_author, sample_playlist)

        author = services.author_bookmarks.get_author_with_bookmarked_playlists(other_author)
        assert [playlist["id"] for playlist in author["bookmarked_playlists"]] == [sample_playlist]

        services.author_bookmarks.unbookmark_playlist(other_author, sample_playlist)
        assert services.playlist_bookmarks.has_bookmarked(other_author, sample_playlist) is False

    def test_unbookmark_missing_author(self, services, sample_video):
        """The author is checked before the bookmark itself."""
        with pytest.raises(NotFoundError) as exc_info:
            services.author_bookmarks.unbookmark_video("missing", sample_video)

        assert "Author 'missing'" in exc_info.value.message

    def test_author_with_bookmarks_missing_author(self, services):
        with pytest.raises(NotFoundError):
            services.author_bookmarks.get_author_with_bookmarked_playlists("missing")

    def test_bookmarks_removed_with_author(self, services, sample_author, sample_video, sample_playlist):
        services.author_bookmarks.bookmark_video(sample_author, sample_video)
        services.author_bookmarks.bookmark_playlist(sample_author, sample_playlist)

        services.authors.delete_author(sample_author)

        assert db.session.query(VideoBookmark).count() == 0
        assert db.session.query(PlaylistBookmark).count() == 0
