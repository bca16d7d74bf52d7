from flask import Blueprint

from cliptube.routes.validation import get_json_body, query_list, validate_tag_ids, validate_video
from cliptube.services import build_services

videos_bp = Blueprint('videos', __name__, url_prefix='/api/videos')


@videos_bp.route('', methods=['GET'])
def list_videos():
    """List videos. ``?tag_ids=a,b`` keeps videos carrying any of the tags."""
    videos = build_services().video_tags.get_videos_by_tags(query_list("tag_ids"))
    return {"success": True, "data": videos}


@videos_bp.route('/<video_id>', methods=['GET'])
def get_video(video_id):
    return {"success": True, "data": build_services().videos.get_video_by_id(video_id)}


@videos_bp.route('', methods=['POST'])
def create_video():
    payload = get_json_body()
    data = validate_video(payload)
    tag_ids = validate_tag_ids(payload, required=False)

    video_id = build_services().video_tags.create_video_with_tags(data, tag_ids)
    return {"success": True, "data": {"id": video_id}}, 201


@videos_bp.route('/<video_id>', methods=['PATCH'])
def update_video(video_id):
    data = validate_video(get_json_body(), partial=True)
    build_services().videos.update_video(video_id, data)
    return {"success": True}


@videos_bp.route('/<video_id>', methods=['DELETE'])
def delete_video(video_id):
    build_services().videos.delete_video(video_id)
    return {"success": True}


@videos_bp.route('/<video_id>/tags', methods=['PUT'])
def replace_video_tags(video_id):
    tag_ids = validate_tag_ids(get_json_body())
    build_services().video_tags.update_video_tags(video_id, tag_ids)
    return {"success": True}


@videos_bp.route('/<video_id>/tags/<tag_id>', methods=['DELETE'])
def remove_video_tag(video_id, tag_id):
    build_services().video_tags.remove_tag_from_video(video_id, tag_id)
    return {"success": True}
