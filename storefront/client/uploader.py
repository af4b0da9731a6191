"""
Admin media uploads: validate a batch, then send it one file at a time.

Flow for `UploadOrchestrator.upload(files, kind)`:
  1. refuse if another batch of the same form is still running
  2. validate every file (type sniffing + size ceiling); one bad file
     rejects the whole batch before any request is made
  3. upload sequentially; each file gets a unique generated key for its
     progress entry, while the server builds the stored name from the
     original file name
  4. append each URL to the form as soon as it arrives; the first failure
     stops the batch (earlier URLs are kept, nothing is deleted)
"""
from __future__ import annotations

import logging
import mimetypes
import os
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Literal, Optional, Sequence

from storefront.client.errors import (
    PermissionDeniedError,
    StorefrontError,
    UploadFailedError,
    UploadInProgressError,
    UploadValidationError,
)
from storefront.client.session import Action, authorize
from storefront.domain.models.user import User
from storefront.domain.services.constants import MAX_IMAGE_BYTES, MAX_VIDEO_BYTES
from storefront.utils.naming import file_extension, unique_object_name

logger = logging.getLogger(__name__)

MediaKind = Literal["image", "desc_image", "video"]

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".heic", ".heif", ".avif"}
VIDEO_EXTENSIONS = {".mp4", ".mov", ".m4v", ".webm", ".3gp", ".mkv", ".avi"}

# (expected media family, byte ceiling) per upload kind
_RULES = {
    "image": ("image", MAX_IMAGE_BYTES),
    "desc_image": ("image", MAX_IMAGE_BYTES),
    "video": ("video", MAX_VIDEO_BYTES),
}


@dataclass
class SelectedFile:
    name: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str) -> "SelectedFile":
        with open(path, "rb") as f:
            content = f.read()
        content_type, _ = mimetypes.guess_type(path)
        return cls(name=os.path.basename(path), content=content, content_type=content_type)


def media_family(file: SelectedFile) -> Optional[str]:
    """
    'image', 'video' or None.
    The declared MIME type wins; the extension is the fallback for pickers
    that send no type (or a generic octet-stream).
    """
    ct = (file.content_type or "").split(";")[0].strip().lower()
    if ct.startswith("image/"):
        return "image"
    if ct.startswith("video/"):
        return "video"
    ext = file_extension(file.name)
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext in VIDEO_EXTENSIONS:
        return "video"
    return None


def validate_file(file: SelectedFile, kind: MediaKind) -> None:
    family, ceiling = _RULES[kind]
    if media_family(file) != family:
        raise UploadValidationError(file.name, f"not a supported {family} file")
    if file.size == 0:
        raise UploadValidationError(file.name, "file is empty")
    if file.size > ceiling:
        raise UploadValidationError(file.name, f"larger than {ceiling // (1024 * 1024)} MB")


class UploadTracker:
    """
    Upload bookkeeping private to one form session.
    `active` counts batches in flight; the progress map is keyed by the
    generated file name and cleared when the last batch ends.
    """

    def __init__(self):
        self._active = 0
        self._progress: Dict[str, float] = {}

    def increment(self) -> None:
        self._active += 1

    def decrement(self) -> None:
        self._active = max(self._active - 1, 0)
        if self._active == 0:
            self._progress.clear()

    def report(self, key: str, percent: float) -> None:
        self._progress[key] = max(0.0, min(100.0, float(percent)))

    @property
    def active(self) -> int:
        return self._active

    @property
    def busy(self) -> bool:
        return self._active > 0

    @property
    def percent(self) -> float:
        """Mean progress over every file of the running batches (0 when idle)."""
        if not self._progress:
            return 0.0
        return sum(self._progress.values()) / len(self._progress)

    def progress_of(self, key: str) -> Optional[float]:
        return self._progress.get(key)


class UploadOrchestrator:
    """
    Binds the API to one product form.
    `form` must expose `uploads` (an UploadTracker) and `add_media(kind, url)`.
    """

    def __init__(
        self,
        api,
        form,
        *,
        user: Optional[User] = None,
        on_progress: Optional[Callable[[str, float], None]] = None,
    ):
        self.api = api
        self.form = form
        self.user = user
        self.on_progress = on_progress

    def _progress_callback(self, key: str) -> Callable[[float], None]:
        def _cb(percent: float) -> None:
            self.form.uploads.report(key, percent)
            if self.on_progress:
                self.on_progress(key, percent)
        return _cb

    async def upload(self, files: Sequence[SelectedFile], kind: MediaKind) -> List[str]:
        """Upload `files` in order; return their URLs (also appended to the form)."""
        tracker: UploadTracker = self.form.uploads
        if self.user is not None:
            decision = authorize(self.user, Action.UPLOAD_MEDIA)
            if not decision:
                raise PermissionDeniedError(decision.reason)
        if tracker.busy:
            raise UploadInProgressError()
        if not files:
            return []

        for f in files:
            validate_file(f, kind)

        keys = [unique_object_name(f.name) for f in files]
        urls: List[str] = []
        t0 = time.perf_counter()
        tracker.increment()
        try:
            for key in keys:
                tracker.report(key, 0.0)
            for f, key in zip(files, keys):
                logger.info("upload start kind=%s file=%s key=%s bytes=%s", kind, f.name, key, f.size)
                try:
                    # the server names the object; `key` only tracks progress here
                    url = await self.api.upload_file(
                        f.name, f.content, f.content_type, on_progress=self._progress_callback(key),
                    )
                except StorefrontError as e:
                    logger.error("upload failed file=%s key=%s err=%s", f.name, key, e.user_message)
                    raise UploadFailedError(f.name) from e
                tracker.report(key, 100.0)
                self.form.add_media(kind, url)
                urls.append(url)
        finally:
            tracker.decrement()

        logger.info("upload batch done kind=%s files=%s time=%.3fs", kind, len(urls), time.perf_counter() - t0)
        return urls
