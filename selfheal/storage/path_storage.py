from __future__ import annotations

import hashlib
import logging
import os
import re
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from selfheal.codec.node_codec import NodeCodec
from selfheal.config.schema import StorageConfig
from selfheal.core.exceptions import DecodeError, EncodeError, StorageError
from selfheal.core.locator import locator_hash
from selfheal.core.node import Node
from selfheal.mapper.dto import RequestDto

log = logging.getLogger(__name__)

# Maximum file name length varies between file systems; stay below the common limit.
MAX_FILE_LENGTH = 128
FILENAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
REPORT_DATA_FILE = "data.json"
REPORT_VIEWER_FILE = "index.html"
DEFAULT_VIEWER_TEMPLATE = Path(__file__).resolve().parent / "assets" / REPORT_VIEWER_FILE


def safe_name(context: str) -> str:
    if FILENAME_PATTERN.fullmatch(context) and len(context) < MAX_FILE_LENGTH:
        return context
    return hashlib.md5(context.encode("utf-8")).hexdigest()


def derive_file_name(context: str, locator: Any) -> str:
    return f"{safe_name(context)}_{locator_hash(locator)}"


class FileSystemPathStorage:
    """File backed store of last valid node paths plus the latest healing report.

    Every public operation holds one instance-wide lock, so concurrent healers
    sharing an instance never interleave writes or read a half-written file.
    """

    def __init__(
        self,
        config: StorageConfig,
        codec: NodeCodec | None = None,
        viewer_template: str | Path = DEFAULT_VIEWER_TEMPLATE,
    ) -> None:
        self.base_path = Path(config.base_path)
        self.report_path = Path(config.report_path)
        self.codec = codec or NodeCodec()
        self.viewer_template = Path(viewer_template)
        self._lock = threading.RLock()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.report_path.mkdir(parents=True, exist_ok=True)

    def persist_last_valid_path(self, locator: Any, context: str, nodes: Iterable[Node]) -> bool:
        """Replaces the stored path for ``(locator, context)``.

        Failures are logged and reported through the return value only; a broken
        history store must not abort the test run that is healing.
        """

        nodes = list(nodes)
        with self._lock:
            path = self.node_path_file(locator, context)
            log.debug("persist_last_valid_path start: %s", path.name)
            try:
                content = self.codec.encode_path(nodes)
                self._write_atomic(path, content)
            except EncodeError:
                log.exception("Could not map the node path for %s to JSON", path.name)
                return False
            except OSError:
                log.exception("Failed to persist last valid path to %s", path)
                return False
            log.debug("persist_last_valid_path finish: %s (%d nodes)", path.name, len(nodes))
            return True

    def get_last_valid_path(self, locator: Any, context: str, link: bool = False) -> list[Node]:
        with self._lock:
            path = self.node_path_file(locator, context)
            if not path.exists():
                return []
            try:
                content = path.read_bytes()
            except OSError as exc:
                raise StorageError(f"Failed to read stored path {path}") from exc
            try:
                return self.codec.decode_path(content, link=link)
            except DecodeError as exc:
                raise DecodeError(f"Stored path {path} is corrupt: {exc}") from exc

    def is_path_persisted(self, locator: Any, context: str) -> bool:
        with self._lock:
            return self.node_path_file(locator, context).exists()

    def remove_path(self, locator: Any, context: str) -> bool:
        with self._lock:
            path = self.node_path_file(locator, context)
            try:
                path.unlink()
            except FileNotFoundError:
                return False
            except OSError as exc:
                raise StorageError(f"Failed to remove stored path {path}") from exc
            return True

    def save_report(self, info: RequestDto) -> Path:
        with self._lock:
            target = self.report_path / REPORT_DATA_FILE
            try:
                self._write_atomic(target, info.model_dump_json(by_alias=True).encode("utf-8"))
            except OSError as exc:
                raise StorageError(f"Failed to write healing report {target}") from exc
            self._ensure_viewer()
            return target

    def load_report(self) -> RequestDto | None:
        with self._lock:
            source = self.report_path / REPORT_DATA_FILE
            if not source.exists():
                return None
            try:
                return RequestDto.model_validate_json(source.read_bytes())
            except OSError as exc:
                raise StorageError(f"Failed to read healing report {source}") from exc
            except ValidationError as exc:
                raise DecodeError(f"Healing report {source} is corrupt: {exc}") from exc

    def node_path_file(self, locator: Any, context: str) -> Path:
        return self.base_path / derive_file_name(context, locator)

    def _ensure_viewer(self) -> None:
        target = self.report_path / REPORT_VIEWER_FILE
        if target.exists():
            return
        try:
            shutil.copyfile(self.viewer_template, target)
        except OSError as exc:
            log.warning("Could not copy report viewer from %s: %s", self.viewer_template, exc)

    @staticmethod
    def _write_atomic(target: Path, content: bytes) -> None:
        handle, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        try:
            with os.fdopen(handle, "wb") as stream:
                stream.write(content)
            # Same mode as a plain open(); mkstemp alone leaves 0600.
            os.chmod(temp_name, 0o666 & ~_current_umask())
            os.replace(temp_name, target)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask
