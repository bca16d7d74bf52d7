"""
Pytest configuration and fixtures for ClipTube tests.
"""
import itertools
import os

import pytest

# Set testing environment before importing app
os.environ["TESTING"] = "true"

from cliptube.app import create_app
from cliptube.models import db
from cliptube.services import build_services


@pytest.fixture(scope="function")
def app():
    """Create and configure a test application instance with in-memory SQLite."""
    test_config = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret-key",
    }

    # Pass test config directly to create_app so it's applied before db.create_all()
    app = create_app(test_config=test_config)

    yield app

    # Cleanup
    with app.app_context():
        db.session.remove()


@pytest.fixture(scope="function")
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture(scope="function")
def services(app):
    """Service graph bound to the session of a pushed application context."""
    with app.app_context():
        yield build_services()
        db.session.remove()


@pytest.fixture(scope="function")
def make_author(services):
    """Factory creating authors through the service layer. Returns the new id."""
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        data = {
            "name": f"author_{n}",
            "icon_url": f"https://avatars.example.com/author_{n}.png",
            "bio": None,
        }
        data.update(overrides)
        return services.authors.create_author(data)

    return _make


@pytest.fixture(scope="function")
def make_video(services):
    """Factory creating videos, optionally tagged. Returns the new id."""
    counter = itertools.count(1)

    def _make(author_id, tags=None, **overrides):
        n = next(counter)
        data = {
            "title": f"Clip {n}",
            "url": f"https://videos.example.com/watch/{n}",
            "start": 10,
            "end": 40,
            "author_id": author_id,
        }
        data.update(overrides)
        return services.video_tags.create_video_with_tags(data, tags or [])

    return _make


@pytest.fixture(scope="function")
def make_playlist(services):
    """Factory creating playlists. Returns the new id."""
    counter = itertools.count(1)

    def _make(author_id, **overrides):
        data = {"title": f"Playlist {next(counter)}", "author_id": author_id}
        data.update(overrides)
        return services.playlists.create_playlist(data)

    return _make


@pytest.fixture(scope="function")
def make_tag(services):
    """Factory creating tags. Returns the new id."""
    counter = itertools.count(1)

    def _make(name=None):
        return services.tags.create_tag({"name": name or f"tag_{next(counter)}"})

    return _make


@pytest.fixture(scope="function")
def sample_author(make_author):
    return make_author(name="alice", bio="Clips about Python")


@pytest.fixture(scope="function")
def other_author(make_author):
    return make_author(name="bob")


@pytest.fixture(scope="function")
def sample_video(make_video, sample_author):
    return make_video(sample_author, title="Decorators in five minutes")


@pytest.fixture(scope="function")
def sample_playlist(make_playlist, sample_author):
    return make_playlist(sample_author, title="Watch later")
