import mimetypes

from fastapi import HTTPException
from fastapi.staticfiles import StaticFiles

# Not every platform's mime database knows these
mimetypes.add_type("text/css", ".css")
mimetypes.add_type("text/javascript", ".js")
mimetypes.add_type("image/png", ".png")
mimetypes.add_type("image/webp", ".webp")
mimetypes.add_type("image/svg+xml", ".svg")
mimetypes.add_type("image/x-icon", ".ico")


def has_parent_segment(path: str) -> bool:
    return ".." in path.replace("\\", "/").split("/")


class PublicFiles(StaticFiles):
    """Static files from the public directory, never outside it"""

    def get_path(self, scope) -> str:
        # scope["path"] is already percent-decoded; check it before
        # normalisation folds the segments away
        if has_parent_segment(scope["path"]):
            raise HTTPException(status_code=404)
        return super().get_path(scope)
