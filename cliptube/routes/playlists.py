from flask import Blueprint

from cliptube.routes.validation import get_json_body, validate_order, validate_playlist, validate_playlist_entry
from cliptube.services import build_services

playlists_bp = Blueprint('playlists', __name__, url_prefix='/api/playlists')


@playlists_bp.route('', methods=['GET'])
def list_playlists():
    """List every playlist with its ordered videos."""
    return {"success": True, "data": build_services().playlist_relations.get_all_playlists_with_videos()}


@playlists_bp.route('/<playlist_id>', methods=['GET'])
def get_playlist(playlist_id):
    playlist = build_services().playlist_relations.get_playlist_with_videos_by_id(playlist_id)
    return {"success": True, "data": playlist}


@playlists_bp.route('', methods=['POST'])
def create_playlist():
    data = validate_playlist(get_json_body())
    playlist_id = build_services().playlists.create_playlist(data)
    return {"success": True, "data": {"id": playlist_id}}, 201


@playlists_bp.route('/<playlist_id>', methods=['PATCH'])
def update_playlist(playlist_id):
    data = validate_playlist(get_json_body(), partial=True)
    build_services().playlists.update_playlist(playlist_id, data)
    return {"success": True}


@playlists_bp.route('/<playlist_id>', methods=['DELETE'])
def delete_playlist(playlist_id):
    build_services().playlists.delete_playlist(playlist_id)
    return {"success": True}


@playlists_bp.route('/<playlist_id>/videos', methods=['POST'])
def add_playlist_video(playlist_id):
    video_id, order = validate_playlist_entry(get_json_body())
    build_services().playlist_videos.add_video_to_playlist(playlist_id, video_id, order)
    return {"success": True}, 201


@playlists_bp.route('/<playlist_id>/videos/<video_id>', methods=['PATCH'])
def reorder_playlist_video(playlist_id, video_id):
    order = validate_order(get_json_body())
    build_services().playlist_videos.update_playlist_video(playlist_id, video_id, order)
    return {"success": True}


@playlists_bp.route('/<playlist_id>/videos/<video_id>', methods=['DELETE'])
def remove_playlist_video(playlist_id, video_id):
    build_services().playlist_videos.remove_video_from_playlist(playlist_id, video_id)
    return {"success": True}
