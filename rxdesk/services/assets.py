# FILE: rxdesk/services/assets.py
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from reportlab.lib.utils import ImageReader

from rxdesk.core.config import settings
from rxdesk.services.errors import AssetLoadError

logger = logging.getLogger(__name__)


class AssetLoader:
    """
    Loads stored image assets (doctor signatures) by storage-relative ref.

    load() never raises: an unreadable asset comes back as AssetLoadError so
    the caller can fall back to text.
    """

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or settings.STORAGE_DIR).resolve()

    def _resolve(self, ref: str) -> Optional[Path]:
        p = (self.root / ref.lstrip("/\\")).resolve()
        if p != self.root and self.root not in p.parents:
            return None
        return p

    def load(self, ref: Optional[str]) -> Union[bytes, AssetLoadError]:
        ref = (ref or "").strip()
        if not ref:
            return AssetLoadError(ref=ref, reason="no asset reference")

        path = self._resolve(ref)
        if path is None:
            logger.warning("Asset ref escapes storage root: %s", ref)
            return AssetLoadError(ref=ref, reason="outside storage root")
        if not path.is_file():
            logger.warning("PDF image not found: %s", path)
            return AssetLoadError(ref=ref, reason="not found")

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning("Failed to read image %s: %s", path, e)
            return AssetLoadError(ref=ref, reason="unreadable")

        # reject bytes reportlab cannot decode before layout relies on them
        try:
            ImageReader(BytesIO(data)).getSize()
        except Exception:
            logger.warning("Not a usable image: %s", path)
            return AssetLoadError(ref=ref, reason="not an image")
        return data
