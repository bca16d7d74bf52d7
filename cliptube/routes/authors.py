from flask import Blueprint

from cliptube.routes.validation import get_json_body, query_flag, validate_author
from cliptube.services import build_services

authors_bp = Blueprint('authors', __name__, url_prefix='/api/authors')


@authors_bp.route('', methods=['GET'])
def list_authors():
    """List authors, optionally with follower/video/playlist counts."""
    services = build_services()
    if query_flag("with_counts"):
        return {"success": True, "data": services.author_counts.list_authors_with_counts()}
    return {"success": True, "data": services.authors.list_authors()}


@authors_bp.route('/<author_id>', methods=['GET'])
def get_author(author_id):
    """Fetch one author.

    Query flags pick the aggregate view: ``with_bookmarks`` (videos, playlists
    and bookmarks), ``with_videos_and_playlists``, ``with_videos``,
    ``with_playlists``.  ``with_counts`` adds the counters to any of them.
    """
    services = build_services()
    with_counts = query_flag("with_counts")

    if query_flag("with_videos_and_playlists") and with_counts:
        return {"success": True, "data": services.catalog.get_author_with_videos_playlists_and_counts(author_id)}

    if query_flag("with_bookmarks"):
        author = services.catalog.get_author_with_videos_playlists_and_bookmarks(author_id)
    elif query_flag("with_videos_and_playlists"):
        author = services.author_relations.get_author_with_videos_and_playlists(author_id)
    elif query_flag("with_videos"):
        author = services.author_relations.get_author_with_videos(author_id)
    elif query_flag("with_playlists"):
        author = services.author_relations.get_author_with_playlists(author_id)
    elif with_counts:
        return {"success": True, "data": services.author_counts.get_author_with_counts(author_id)}
    else:
        author = services.authors.get_author_by_id(author_id)

    if with_counts:
        author = services.author_counts.attach_counts(author)
    return {"success": True, "data": author}


@authors_bp.route('', methods=['POST'])
def create_author():
    data = validate_author(get_json_body())
    author_id = build_services().authors.create_author(data)
    return {"success": True, "data": {"id": author_id}}, 201


@authors_bp.route('/<author_id>', methods=['PATCH'])
def update_author(author_id):
    data = validate_author(get_json_body(), partial=True)
    build_services().authors.update_author(author_id, data)
    return {"success": True}


@authors_bp.route('/<author_id>', methods=['DELETE'])
def delete_author(author_id):
    build_services().authors.delete_author(author_id)
    return {"success": True}


@authors_bp.route('/<author_id>/bookmarks/videos', methods=['GET'])
def list_bookmarked_videos(author_id):
    author = build_services().author_bookmarks.get_author_with_bookmarked_videos(author_id)
    return {"success": True, "data": author["bookmarked_videos"]}


@authors_bp.route('/<author_id>/bookmarks/videos/<video_id>', methods=['GET'])
def video_bookmark_status(author_id, video_id):
    bookmarked = build_services().video_bookmarks.has_bookmarked(author_id, video_id)
    return {"success": True, "data": {"bookmarked": bookmarked}}


@authors_bp.route('/<author_id>/bookmarks/videos/<video_id>', methods=['PUT'])
def bookmark_video(author_id, video_id):
    bookmark = build_services().author_bookmarks.bookmark_video(author_id, video_id)
    return {"success": True, "data": bookmark}


@authors_bp.route('/<author_id>/bookmarks/videos/<video_id>', methods=['DELETE'])
def unbookmark_video(author_id, video_id):
    build_services().author_bookmarks.unbookmark_video(author_id, video_id)
    return {"success": True}


@authors_bp.route('/<author_id>/bookmarks/playlists', methods=['GET'])
def list_bookmarked_playlists(author_id):
    author = build_services().author_bookmarks.get_author_with_bookmarked_playlists(author_id)
    return {"success": True, "data": author["bookmarked_playlists"]}


@authors_bp.route('/<author_id>/bookmarks/playlists/<playlist_id>', methods=['GET'])
def playlist_bookmark_status(author_id, playlist_id):
    bookmarked = build_services().playlist_bookmarks.has_bookmarked(author_id, playlist_id)
    return {"success": True, "data": {"bookmarked": bookmarked}}


@authors_bp.route('/<author_id>/bookmarks/playlists/<playlist_id>', methods=['PUT'])
def bookmark_playlist(author_id, playlist_id):
    bookmark = build_services().author_bookmarks.bookmark_playlist(author_id, playlist_id)
    return {"success": True, "data": bookmark}


@authors_bp.route('/<author_id>/bookmarks/playlists/<playlist_id>', methods=['DELETE'])
def unbookmark_playlist(author_id, playlist_id):
    build_services().author_bookmarks.unbookmark_playlist(author_id, playlist_id)
    return {"success": True}
