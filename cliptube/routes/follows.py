from flask import Blueprint

from cliptube.services import build_services

follows_bp = Blueprint('follows', __name__, url_prefix='/api/authors')


@follows_bp.route('/<author_id>/followers', methods=['GET'])
def list_followers(author_id):
    return {"success": True, "data": build_services().follows.get_followers(author_id)}


@follows_bp.route('/<author_id>/following', methods=['GET'])
def list_following(author_id):
    return {"success": True, "data": build_services().follows.get_following(author_id)}


@follows_bp.route('/<author_id>/following/<target_id>', methods=['GET'])
def following_status(author_id, target_id):
    following = build_services().follows.is_following(author_id, target_id)
    return {"success": True, "data": {"following": following}}


@follows_bp.route('/<author_id>/following/<target_id>', methods=['PUT'])
def follow(author_id, target_id):
    """Follow ``target_id``. Repeating the call changes nothing."""
    build_services().follows.follow_user(author_id, target_id)
    return {"success": True}


@follows_bp.route('/<author_id>/following/<target_id>', methods=['DELETE'])
def unfollow(author_id, target_id):
    build_services().follows.unfollow_user(author_id, target_id)
    return {"success": True}
