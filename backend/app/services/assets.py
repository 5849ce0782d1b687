"""Image asset lookup for form avatars and backgrounds."""

from pathlib import Path

from app.core.config import settings


class AssetStorage:
    """Resolves stored asset paths against an upload root and a public base URL."""

    def __init__(self, root: str | Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def exists(self, path: str | None) -> bool:
        """True when ``path`` names a file inside the upload root."""
        if not path:
            return False
        resolved = (self.root / path).resolve()
        if not resolved.is_relative_to(self.root.resolve()):
            return False
        return resolved.is_file()

    def public_url(self, path: str | None) -> str | bool:
        """Public URL of the image at ``path``, or False when it isn't stored."""
        if not self.exists(path):
            return False
        return f"{self.base_url}/images/{path}"


def get_asset_storage() -> AssetStorage:
    """FastAPI dependency returning storage rooted at ``settings.UPLOAD_DIR``."""
    return AssetStorage(settings.UPLOAD_DIR, settings.ASSET_BASE_URL)
