"""
Asset Storage Service

Manages the public upload directory: collision-resistant filenames, staged
batch writes and the final commit of a batch into the content directory.
"""

import logging
import os
import secrets
import shutil
import string
import time
import uuid
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Dict, Iterable, List, Optional

from asset_ingest.config import settings
from asset_ingest.middleware.error_handler import DiskWriteError

logger = logging.getLogger(__name__)

STAGING_SUFFIX = "-staging"
THUMBNAIL_SUFFIX = ".jpg"

# Generated names stay well under the common 255-byte filename limit
MAX_BASE_BYTES = 200
MAX_EXTENSION_BYTES = 32

_BASE36 = string.ascii_lowercase + string.digits


def random_suffix(length: int = 6) -> str:
    """Short random lowercase alphanumeric string."""
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def now_millis() -> int:
    return int(time.time() * 1000)


def generate_file_id() -> str:
    """Request-scoped identifier: epoch milliseconds plus a random suffix."""
    return f"{now_millis()}-{random_suffix(10)}"


def split_original_name(original_name: str) -> tuple[str, str]:
    """
    Split an untrusted client filename into (base, extension).

    Directory components from either path convention are dropped so the
    name can never escape the upload directory. Overlong extensions are
    dropped and the base is cut so base plus extension fit MAX_BASE_BYTES
    of UTF-8.
    """
    name = PureWindowsPath(PurePosixPath(original_name or "").name).name
    name = name.lstrip(".") or "file"
    path = PurePosixPath(name)
    base, ext = path.stem or "file", path.suffix
    if len(ext.encode("utf-8")) > MAX_EXTENSION_BYTES:
        ext = ""
    limit = MAX_BASE_BYTES - len(ext.encode("utf-8"))
    base = base.encode("utf-8")[:limit].decode("utf-8", errors="ignore") or "file"
    return base, ext


class StagingBatch:
    """
    A set of files written to a private staging directory.

    Nothing is visible in the content directory until commit(). Leaving the
    context without committing removes everything staged.
    """

    def __init__(self, storage: "AssetStorage"):
        self.storage = storage
        self.batch_id = uuid.uuid4().hex
        self.path = storage.staging_path / self.batch_id
        self.thumbnails_path = self.path / storage.thumbnail_dirname
        self.filenames: List[str] = []
        self.thumbnails: Dict[str, str] = {}
        self.committed = False

    def __enter__(self) -> "StagingBatch":
        self.thumbnails_path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Opened staging batch {self.batch_id}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.committed:
            logger.warning(f"Discarding staging batch {self.batch_id}")
        shutil.rmtree(self.path, ignore_errors=True)

    def reserve_filename(self, original_name: str) -> str:
        """Generate a filename unique in the content directory and this batch."""
        filename = self.storage.generate_filename(original_name, reserved=self.filenames)
        self.filenames.append(filename)
        return filename

    def write(self, filename: str, content: bytes) -> Path:
        """Write a reserved file into staging."""
        file_path = self.path / filename
        try:
            file_path.write_bytes(content)
            # rw-r--r--
            file_path.chmod(0o644)
        except OSError as e:
            logger.error(f"Failed to stage {filename}: {str(e)}")
            raise DiskWriteError(str(file_path), str(e))
        return file_path

    def thumbnail_path(self, filename: str) -> Path:
        """Staging location for the thumbnail of a reserved file."""
        return self.thumbnails_path / self.storage.thumbnail_name(filename)

    def add_thumbnail(self, filename: str, thumbnail: Path) -> None:
        self.thumbnails[filename] = thumbnail.name

    def commit(self) -> None:
        """
        Move every staged file and thumbnail into the content directory.

        If a move fails, files already moved are removed again before the
        error propagates.
        """
        moves = [
            (self.path / name, self.storage.upload_path / name)
            for name in self.filenames
        ] + [
            (self.thumbnails_path / thumb, self.storage.thumbnails_path / thumb)
            for thumb in self.thumbnails.values()
        ]

        self.storage.ensure_directories()
        done: List[Path] = []
        try:
            for source, target in moves:
                os.replace(source, target)
                done.append(target)
        except OSError as e:
            logger.error(f"Commit of batch {self.batch_id} failed: {str(e)}")
            for target in done:
                target.unlink(missing_ok=True)
            raise DiskWriteError(str(self.storage.upload_path), str(e))

        self.committed = True
        logger.info(f"Committed batch {self.batch_id}: {len(self.filenames)} file(s)")


class AssetStorage:
    """
    Manages file storage for uploaded assets.

    Layout:
    - <upload_dir>/<generated name>
    - <upload_dir>/thumbnails/<generated stem>.jpg
    - <parent>/.<upload_dir name>-staging/<batch id>/ while a batch is in
      flight, outside the publicly served directory
    """

    def __init__(
        self,
        upload_dir: str,
        url_prefix: str = "/uploads",
        thumbnail_dirname: str = "thumbnails",
    ):
        self.upload_path = Path(upload_dir)
        self.thumbnail_dirname = thumbnail_dirname
        self.thumbnails_path = self.upload_path / thumbnail_dirname
        self.staging_path = self.upload_path.parent / f".{self.upload_path.name}{STAGING_SUFFIX}"
        self.url_prefix = url_prefix.rstrip("/")

    def ensure_directories(self) -> None:
        """Create the content and thumbnail directories if absent."""
        self.upload_path.mkdir(parents=True, exist_ok=True)
        self.thumbnails_path.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def thumbnail_name(filename: str) -> str:
        return Path(filename).stem + THUMBNAIL_SUFFIX

    def generate_filename(self, original_name: str, reserved: Iterable[str] = ()) -> str:
        """
        Derive `<base>_<epoch ms>_<random><ext>` from the original name.

        Regenerates on the unlikely collision with an existing upload,
        thumbnail, or a name reserved by the current batch.
        """
        base, ext = split_original_name(original_name)
        reserved = set(reserved)
        while True:
            filename = f"{base}_{now_millis()}_{random_suffix()}{ext}"
            if filename in reserved:
                continue
            if (self.upload_path / filename).exists():
                continue
            if (self.thumbnails_path / self.thumbnail_name(filename)).exists():
                continue
            return filename

    def stage_batch(self) -> StagingBatch:
        """Open a staging batch; use as a context manager."""
        return StagingBatch(self)

    def file_path(self, filename: str) -> Path:
        return self.upload_path / filename

    def file_url(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    def thumbnail_url(self, thumbnail_name: str) -> str:
        return f"{self.url_prefix}/{self.thumbnail_dirname}/{thumbnail_name}"

    def committed_thumbnail_url(self, batch: StagingBatch, filename: str) -> Optional[str]:
        thumb = batch.thumbnails.get(filename)
        return self.thumbnail_url(thumb) if thumb else None


def get_asset_storage() -> AssetStorage:
    """FastAPI dependency returning storage bound to the configured directory."""
    return AssetStorage(
        upload_dir=settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        thumbnail_dirname=settings.THUMBNAIL_DIRNAME,
    )
