#!/usr/bin/env python
"""
Tool to populate the catalog with fake authors, clips, tags and playlists
for testing purposes. Everything is created through the service layer so the
same existence checks apply as for API traffic.

Usage:
    python tools/populate_catalog.py populate [OPTIONS]
    python tools/populate_catalog.py summary
    python tools/populate_catalog.py clear
"""
import random
import sys
from pathlib import Path
from typing import Annotated

import typer

# Add parent directory to path to import cliptube
sys.path.insert(0, str(Path(__file__).parent.parent))

from cliptube.app import create_app
from cliptube.errors import CatalogError
from cliptube.models import (
    Author,
    Follow,
    Playlist,
    PlaylistBookmark,
    PlaylistVideo,
    Tag,
    Video,
    VideoBookmark,
    VideoTag,
    db,
)
from cliptube.services import Services, build_services

app = typer.Typer(help="Populate the catalog with fake data for testing.")

SEED_BIO = "Seeded by populate_catalog"

AUTHOR_NAMES = [
    "dev_master", "code_ninja", "tech_guru", "pixel_artist", "data_wizard",
    "cloud_surfer", "byte_hunter", "stack_hero", "git_pusher", "docker_fan",
    "react_dev", "python_lover", "rust_crab", "go_gopher", "java_bean",
]

TAG_NAMES = [
    "python", "javascript", "docker", "kubernetes", "databases", "testing",
    "devops", "security", "machine-learning", "web", "cli", "performance",
]

TITLES = [
    "Best moment of {topic}",
    "{topic} in one minute",
    "The {topic} trick nobody mentions",
    "Why {topic} breaks in production",
    "{topic} explained with a whiteboard",
    "Live coding: {topic}",
]

TOPICS = [
    "Python", "Docker", "Kubernetes", "PostgreSQL", "Redis", "Flask",
    "SQLAlchemy", "pytest", "asyncio", "Terraform", "Git", "Linux",
]

PLAYLIST_TITLES = [
    "Watch later", "Favourite clips", "Conference highlights",
    "Debugging stories", "Weekend learning", "Team picks",
]


def generate_clip_bounds() -> tuple[int, int]:
    """Random clip window inside a video of up to one hour."""
    start = random.randint(0, 3000)
    return start, start + random.randint(5, 600)


def create_fake_authors(services: Services, count: int) -> list[str]:
    names = AUTHOR_NAMES.copy()
    random.shuffle(names)

    author_ids = []
    for i in range(count):
        name = names[i] if i < len(names) else f"author_{i}"
        author_ids.append(services.authors.create_author({
            "name": name,
            "icon_url": f"https://avatars.example.com/{name}.png",
            "bio": SEED_BIO,
        }))
    return author_ids


def create_fake_tags(services: Services) -> list[str]:
    """Create the seed tags, reusing the ones that already exist."""
    existing = {tag["name"]: tag["id"] for tag in services.tags.list_tags()}
    tag_ids = []
    for name in TAG_NAMES:
        if name not in existing:
            existing[name] = services.tags.create_tag({"name": name})
        tag_ids.append(existing[name])
    return tag_ids


def create_fake_videos(services: Services, count: int, author_ids: list[str], tag_ids: list[str]) -> list[str]:
    video_ids = []
    for i in range(count):
        start, end = generate_clip_bounds()
        data = {
            "title": random.choice(TITLES).format(topic=random.choice(TOPICS)),
            "url": f"https://videos.example.com/watch/{i}",
            "start": start,
            "end": end,
            "author_id": random.choice(author_ids),
        }
        tags = random.sample(tag_ids, k=random.randint(0, min(3, len(tag_ids))))
        video_ids.append(services.video_tags.create_video_with_tags(data, tags))

        if (i + 1) % 10 == 0:
            typer.echo(f"Created {i + 1}/{count} videos...")
    return video_ids


def create_fake_playlists(services: Services, count: int, author_ids: list[str], video_ids: list[str]) -> list[str]:
    playlist_ids = []
    for _ in range(count):
        playlist_id = services.playlists.create_playlist({
            "title": random.choice(PLAYLIST_TITLES),
            "author_id": random.choice(author_ids),
        })
        entries = random.sample(video_ids, k=random.randint(0, min(8, len(video_ids))))
        for order, video_id in enumerate(entries, start=1):
            services.playlist_videos.add_video_to_playlist(playlist_id, video_id, order)
        playlist_ids.append(playlist_id)
    return playlist_ids


def create_fake_follows(services: Services, author_ids: list[str], count: int) -> None:
    if len(author_ids) < 2:
        return
    for _ in range(count):
        follower_id, following_id = random.sample(author_ids, k=2)
        services.follows.follow_user(follower_id, following_id)


def create_fake_bookmarks(
    services: Services,
    author_ids: list[str],
    video_ids: list[str],
    playlist_ids: list[str],
    count: int,
) -> None:
    for _ in range(count):
        author_id = random.choice(author_ids)
        if playlist_ids and random.random() < 0.3:
            services.author_bookmarks.bookmark_playlist(author_id, random.choice(playlist_ids))
        elif video_ids:
            services.author_bookmarks.bookmark_video(author_id, random.choice(video_ids))


def clear_fake_data(services: Services) -> dict[str, int]:
    """Remove seeded authors with their videos and playlists, then seed tags."""
    results = {"authors": 0, "videos": 0, "playlists": 0, "tags": 0}

    seeded = [author for author in services.authors.list_authors() if author["bio"] == SEED_BIO]
    for author in seeded:
        video_ids = [video_id for (video_id,) in db.session.query(Video.id).filter_by(author_id=author["id"])]
        for video_id in video_ids:
            services.videos.delete_video(video_id)
        results["videos"] += len(video_ids)

        playlist_ids = services.playlists.list_playlist_ids_by_author(author["id"])
        for playlist_id in playlist_ids:
            services.playlists.delete_playlist(playlist_id)
        results["playlists"] += len(playlist_ids)

        services.authors.delete_author(author["id"])
        results["authors"] += 1

    for tag in services.tags.list_tags():
        if tag["name"] in TAG_NAMES:
            services.tags.delete_tag(tag["id"])
            results["tags"] += 1

    return results


@app.command()
def populate(
    authors: Annotated[int, typer.Option("--authors", "-a", help="Number of fake authors to create")] = 5,
    videos: Annotated[int, typer.Option("--videos", "-n", help="Number of fake videos to create")] = 50,
    playlists: Annotated[int, typer.Option("--playlists", "-p", help="Number of fake playlists to create")] = 10,
    follows: Annotated[int, typer.Option("--follows", "-f", help="Number of follow edges to attempt")] = 10,
    bookmarks: Annotated[int, typer.Option("--bookmarks", "-b", help="Number of bookmarks to attempt")] = 20,
) -> None:
    """Populate the catalog with fake authors, videos, playlists, follows and bookmarks."""
    if authors < 1:
        typer.echo("At least one author is required.", err=True)
        raise typer.Exit(code=1)

    flask_app = create_app()

    with flask_app.app_context():
        services = build_services()
        try:
            typer.echo(f"Creating {authors} fake authors...")
            author_ids = create_fake_authors(services, authors)

            tag_ids = create_fake_tags(services)
            typer.echo(f"  Using {len(tag_ids)} tags")

            typer.echo(f"\nCreating {videos} fake videos...")
            video_ids = create_fake_videos(services, videos, author_ids, tag_ids)

            typer.echo(f"\nCreating {playlists} fake playlists...")
            playlist_ids = create_fake_playlists(services, playlists, author_ids, video_ids)

            create_fake_follows(services, author_ids, follows)
            create_fake_bookmarks(services, author_ids, video_ids, playlist_ids, bookmarks)
        except CatalogError as e:
            typer.echo(f"Populate failed: {e.message}", err=True)
            raise typer.Exit(code=1)

        typer.echo("\nSample authors created:")
        for author in services.author_counts.list_authors_with_counts()[:5]:
            typer.echo(
                f"  - [{author['id']}] {author['name']}: "
                f"{author['video_count']} videos, {author['playlist_count']} playlists, "
                f"{author['follower_count']} followers"
            )


@app.command()
def summary() -> None:
    """Print row counts per table and per-author aggregates."""
    flask_app = create_app()

    with flask_app.app_context():
        typer.echo("Rows:")
        for label, model in (
            ("Authors", Author),
            ("Videos", Video),
            ("Playlists", Playlist),
            ("Tags", Tag),
            ("Playlist entries", PlaylistVideo),
            ("Video tags", VideoTag),
            ("Follows", Follow),
            ("Video bookmarks", VideoBookmark),
            ("Playlist bookmarks", PlaylistBookmark),
        ):
            typer.echo(f"  {label}: {db.session.query(model).count()}")

        typer.echo("\nAuthors:")
        for author in build_services().author_counts.list_authors_with_counts():
            typer.echo(
                f"  - {author['name']}: {author['video_count']} videos, "
                f"{author['playlist_count']} playlists, {author['follower_count']} followers"
            )


@app.command()
def clear() -> None:
    """Clear all seeded data from the catalog."""
    flask_app = create_app()

    with flask_app.app_context():
        results = clear_fake_data(build_services())
        typer.echo("Cleared fake data:")
        typer.echo(f"  Authors: {results['authors']}")
        typer.echo(f"  Videos: {results['videos']}")
        typer.echo(f"  Playlists: {results['playlists']}")
        typer.echo(f"  Tags: {results['tags']}")


if __name__ == "__main__":
    app()
