from flask import Blueprint

from cliptube.routes.validation import get_json_body, query_list, validate_tag
from cliptube.services import build_services

tags_bp = Blueprint('tags', __name__, url_prefix='/api/tags')


@tags_bp.route('', methods=['GET'])
def list_tags():
    return {"success": True, "data": build_services().tag_relations.list_tags_with_videos()}


@tags_bp.route('/videos', methods=['GET'])
def videos_with_any_tag():
    """Ids of videos carrying at least one of ``?tag_ids=``."""
    video_ids = build_services().tag_search.get_videos_by_tag_ids(query_list("tag_ids"))
    return {"success": True, "data": video_ids}


@tags_bp.route('/videos/all', methods=['GET'])
def videos_with_all_tags():
    """Ids of videos carrying every one of ``?tag_ids=``."""
    video_ids = build_services().tag_search.get_videos_by_all_tags(query_list("tag_ids"))
    return {"success": True, "data": video_ids}


@tags_bp.route('/<tag_id>', methods=['GET'])
def get_tag(tag_id):
    return {"success": True, "data": build_services().tag_relations.get_tag_with_videos_by_id(tag_id)}


@tags_bp.route('', methods=['POST'])
def create_tag():
    data = validate_tag(get_json_body())
    tag_id = build_services().tags.create_tag(data)
    return {"success": True, "data": {"id": tag_id}}, 201


@tags_bp.route('/<tag_id>', methods=['PATCH'])
def update_tag(tag_id):
    data = validate_tag(get_json_body(), partial=True)
    build_services().tags.update_tag(tag_id, data)
    return {"success": True}


@tags_bp.route('/<tag_id>', methods=['DELETE'])
def delete_tag(tag_id):
    build_services().tags.delete_tag(tag_id)
    return {"success": True}
