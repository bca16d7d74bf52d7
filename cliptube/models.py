import secrets
import sqlite3
import string
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()

ID_ALPHABET = string.ascii_letters + string.digits + "_-"


def generate_id(length: int = 21) -> str:
    """Generate a random URL-safe identifier."""
    return ''.join(secrets.choice(ID_ALPHABET) for _ in range(length))


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Author(db.Model):
    __tablename__ = "authors"

    id = db.Column(db.String(21), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    icon_url = db.Column(db.String(2048), nullable=False)
    bio = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "icon_url": self.icon_url,
            "bio": self.bio,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }


class Video(db.Model):
    __tablename__ = "videos"

    id = db.Column(db.String(21), primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    url = db.Column(db.String(2048), nullable=False)
    start = db.Column(db.Integer, nullable=False)  # seconds
    end = db.Column(db.Integer, nullable=False)  # seconds
    # Not a foreign key: deleting an author leaves its videos orphaned
    author_id = db.Column(db.String(21), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "start": self.start,
            "end": self.end,
            "author_id": self.author_id,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }


class Playlist(db.Model):
    __tablename__ = "playlists"

    id = db.Column(db.String(21), primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    # Same unenforced author reference as Video.author_id
    author_id = db.Column(db.String(21), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author_id": self.author_id,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }


class Tag(db.Model):
    __tablename__ = "tags"

    id = db.Column(db.String(21), primary_key=True)
    name = db.Column(db.String(255), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }


class PlaylistVideo(db.Model):
    __tablename__ = "playlist_videos"
    __table_args__ = (
        db.UniqueConstraint("playlist_id", "video_id", name="unique_playlist_video"),
    )

    id = db.Column(db.String(21), primary_key=True)
    playlist_id = db.Column(db.String(21), db.ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = db.Column(db.String(21), db.ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    # Caller supplied, never compacted; ties are allowed
    order = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)


class VideoTag(db.Model):
    __tablename__ = "video_tags"

    video_id = db.Column(db.String(21), db.ForeignKey("videos.id"), primary_key=True)
    tag_id = db.Column(db.String(21), db.ForeignKey("tags.id"), primary_key=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)


class Follow(db.Model):
    __tablename__ = "follows"

    follower_id = db.Column(db.String(21), db.ForeignKey("authors.id", ondelete="CASCADE"), primary_key=True)
    following_id = db.Column(db.String(21), db.ForeignKey("authors.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)


class VideoBookmark(db.Model):
    __tablename__ = "video_bookmarks"
    __table_args__ = (
        db.UniqueConstraint("author_id", "video_id", name="video_bookmark_author_video_idx"),
    )

    id = db.Column(db.String(21), primary_key=True)
    author_id = db.Column(db.String(21), db.ForeignKey("authors.id", ondelete="CASCADE"), nullable=False)
    video_id = db.Column(db.String(21), db.ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "author_id": self.author_id, "video_id": self.video_id}


class PlaylistBookmark(db.Model):
    __tablename__ = "playlist_bookmarks"
    __table_args__ = (
        db.UniqueConstraint("author_id", "playlist_id", name="playlist_bookmark_author_playlist_idx"),
    )

    id = db.Column(db.String(21), primary_key=True)
    author_id = db.Column(db.String(21), db.ForeignKey("authors.id", ondelete="CASCADE"), nullable=False)
    playlist_id = db.Column(db.String(21), db.ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "author_id": self.author_id, "playlist_id": self.playlist_id}
