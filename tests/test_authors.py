"""
Tests for authors: CRUD, relations, counts and composite views.
"""
from unittest.mock import patch

import pytest

from cliptube.errors import DatabaseError, NotFoundError
from cliptube.models import Playlist, Video, db


class TestAuthorCrud:
    """Tests for the author base service."""

    def test_create_and_get(self, services):
        author_id = services.authors.create_author({
            "name": "dana",
            "icon_url": "https://avatars.example.com/dana.png",
        })

        author = services.authors.get_author_by_id(author_id)
        assert author["name"] == "dana"
        assert author["bio"] is None
        assert author["created_at"] == author["updated_at"]

    def test_get_missing_author(self, services):
        with pytest.raises(NotFoundError) as exc_info:
            services.authors.get_author_by_id("missing")

        assert exc_info.value.error_code == "NOT_FOUND"
        assert exc_info.value.status_code == 404

    def test_list_authors(self, services, sample_author, other_author):
        names = sorted(author["name"] for author in services.authors.list_authors())

        assert names == ["alice", "bob"]

    def test_update_preserves_unspecified_fields(self, services, sample_author):
        services.authors.update_author(sample_author, {"bio": "New bio"})

        author = services.authors.get_author_by_id(sample_author)
        assert author["bio"] == "New bio"
        assert author["name"] == "alice"

    def test_update_missing_author(self, services):
        with pytest.raises(NotFoundError):
            services.authors.update_author("missing", {"name": "x"})

    def test_delete_orphans_videos_and_playlists(self, services, sample_author, sample_video, sample_playlist):
        """Videos and playlists stay in storage after their author is deleted."""
        services.authors.delete_author(sample_author)

        assert db.session.query(Video).count() == 1
        assert db.session.query(Playlist).count() == 1
        with pytest.raises(NotFoundError):
            services.authors.get_author_by_id(sample_author)

    def test_delete_missing_author(self, services):
        with pytest.raises(NotFoundError):
            services.authors.delete_author("missing")


class TestAuthorRelations:
    """Tests for authors read back with their videos and playlists."""

    def test_author_with_videos(self, services, make_tag, make_video, sample_author, other_author):
        tag_id = make_tag("python")
        mine = make_video(sample_author, tags=[tag_id])
        make_video(other_author)

        author = services.author_relations.get_author_with_videos(sample_author)

        assert author["name"] == "alice"
        assert [video["id"] for video in author["videos"]] == [mine]
        assert author["videos"][0]["tags"][0]["name"] == "python"
        assert "playlists" not in author

    def test_author_with_playlists(self, services, make_video, sample_author, sample_playlist):
        b = make_video(sample_author)
        a = make_video(sample_author)
        services.playlist_videos.add_video_to_playlist(sample_playlist, b, 2)
        services.playlist_videos.add_video_to_playlist(sample_playlist, a, 1)

        author = services.author_relations.get_author_with_playlists(sample_author)

        assert [playlist["id"] for playlist in author["playlists"]] == [sample_playlist]
        assert [video["id"] for video in author["playlists"][0]["videos"]] == [a, b]
        assert "videos" not in author

    def test_author_with_videos_and_playlists(self, services, sample_author, sample_video, sample_playlist):
        author = services.author_relations.get_author_with_videos_and_playlists(sample_author)

        assert [video["id"] for video in author["videos"]] == [sample_video]
        assert [playlist["id"] for playlist in author["playlists"]] == [sample_playlist]

    def test_author_without_content(self, services, sample_author):
        author = services.author_relations.get_author_with_videos_and_playlists(sample_author)

        assert author["videos"] == []
        assert author["playlists"] == []

    def test_missing_author(self, services):
        with pytest.raises(NotFoundError):
            services.author_relations.get_author_with_videos("missing")
        with pytest.raises(NotFoundError):
            services.author_relations.get_author_with_playlists("missing")


class TestAuthorCounts:
    """Tests for follower, video and playlist counters."""

    def test_counts(self, services, make_author, make_video, make_playlist, sample_author, other_author):
        carol = make_author(name="carol")
        make_video(sample_author)
        make_video(sample_author)
        make_playlist(sample_author)
        services.follows.follow_user(other_author, sample_author)
        services.follows.follow_user(carol, sample_author)
        services.follows.follow_user(sample_author, carol)

        author = services.author_counts.get_author_with_counts(sample_author)

        assert author["follower_count"] == 2
        assert author["video_count"] == 2
        assert author["playlist_count"] == 1

    def test_counts_for_empty_author(self, services, sample_author):
        author = services.author_counts.get_author_with_counts(sample_author)

        assert (author["follower_count"], author["video_count"], author["playlist_count"]) == (0, 0, 0)

    def test_list_authors_with_counts(self, services, make_video, sample_author, other_author):
        make_video(other_author)

        authors = {author["name"]: author for author in services.author_counts.list_authors_with_counts()}

        assert authors["alice"]["video_count"] == 0
        assert authors["bob"]["video_count"] == 1

    def test_counts_missing_author(self, services):
        with pytest.raises(NotFoundError):
            services.author_counts.get_author_with_counts("missing")


class TestCompositeViews:
    """Tests for the composite author aggregators."""

    def test_videos_playlists_and_bookmarks(self, services, make_video, sample_author, other_author, sample_playlist):
        own_video = make_video(sample_author)
        bookmarked_video = make_video(other_author)
        services.author_bookmarks.bookmark_video(sample_author, bookmarked_video)
        services.author_bookmarks.bookmark_playlist(sample_author, sample_playlist)

        author = services.catalog.get_author_with_videos_playlists_and_bookmarks(sample_author)

        assert [video["id"] for video in author["videos"]] == [own_video]
        assert [playlist["id"] for playlist in author["playlists"]] == [sample_playlist]
        assert [video["id"] for video in author["bookmarked_videos"]] == [bookmarked_video]
        assert [playlist["id"] for playlist in author["bookmarked_playlists"]] == [sample_playlist]

    def test_videos_playlists_and_counts(self, services, sample_author, other_author, sample_video, sample_playlist):
        services.follows.follow_user(other_author, sample_author)

        author = services.catalog.get_author_with_videos_playlists_and_counts(sample_author)

        assert [video["id"] for video in author["videos"]] == [sample_video]
        assert author["follower_count"] == 1
        assert author["video_count"] == 1
        assert author["playlist_count"] == 1

    def test_missing_author_short_circuits(self, services):
        """An unknown author stops the aggregate before any bookmark lookup."""
        bookmarks = services.catalog.bookmarks.video_bookmarks
        with patch.object(bookmarks, "get_bookmarks_by_author_id") as lookup:
            with pytest.raises(NotFoundError):
                services.catalog.get_author_with_videos_playlists_and_bookmarks("missing")

        lookup.assert_not_called()

    def test_failure_propagates(self, services, sample_author):
        """Aggregators do not isolate failures of their parts."""
        bookmarks = services.catalog.bookmarks.playlist_bookmarks
        error = DatabaseError("Failed to list bookmarked playlists: disk I/O error")
        with patch.object(bookmarks, "get_bookmarks_by_author_id", side_effect=error):
            with pytest.raises(DatabaseError) as exc_info:
                services.catalog.get_author_with_videos_playlists_and_bookmarks(sample_author)

        assert exc_info.value is error
