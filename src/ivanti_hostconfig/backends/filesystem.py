"""Local filesystem backend for managed files."""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import tempfile
from pathlib import Path

from ..errors import FsError
from .base import Filesystem

logger = logging.getLogger(__name__)


class LocalFilesystem(Filesystem):
    def read_file(self, path: str) -> bytes | None:
        try:
            return Path(path).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise FsError(f"Cannot read {path}: {exc}") from exc

    def write_file(
        self,
        path: str,
        content: bytes,
        mode: int | None = None,
        owner: str | None = None,
        group: str | None = None,
    ) -> None:
        """Write *content* to a sibling temp file, set mode and ownership, then rename it over *path*.

        The temp name starts with a dot, so sudo's ``#includedir`` never picks up
        a half-written drop-in.
        """
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(content)
                if mode is not None:
                    os.chmod(tmp_name, mode)
                if owner is not None or group is not None:
                    shutil.chown(tmp_name, user=owner, group=group)
                os.replace(tmp_name, target)
            except BaseException:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_name)
                raise
        except (OSError, LookupError) as exc:
            raise FsError(f"Cannot write {path}: {exc}") from exc
        logger.info("Wrote %s (%d bytes)", path, len(content))
