from cliptube.routes.authors import authors_bp
from cliptube.routes.follows import follows_bp
from cliptube.routes.playlists import playlists_bp
from cliptube.routes.tags import tags_bp
from cliptube.routes.videos import videos_bp

__all__ = ["authors_bp", "follows_bp", "playlists_bp", "tags_bp", "videos_bp"]
