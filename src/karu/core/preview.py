"""
Preview classification for the selected entry.

Decides whether an entry is shown as text, an image, or one of the fallback
messages. Classification only reads the file; it never mutates anything and
can be recomputed every frame.

Modified: 2025-11-12
"""

import logging
from dataclasses import dataclass
from enum import Enum
from itertools import islice
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple

from PIL import Image

from karu.core.exceptions import PreviewUnavailable
from karu.core.models import Entry


logger = logging.getLogger(__name__)


KB = 1024
MB = KB * 1024
GB = MB * 1024

MAX_PREVIEW_SIZE_MB = 300
SNIFF_BYTES = 1024
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "bmp", "ico", "tiff", "webp"})
DEFAULT_BLOCKED_NAMES = frozenset({".wget-hsts"})
ELLIPSIS = "..."


def format_size(size: int) -> str:
    """Format a byte count (e.g. 512 B, 1.5 KB, 20.0 MB, 3.2 GB)."""
    if size >= GB:
        return f"{size / GB:.1f} GB"
    if size >= MB:
        return f"{size / MB:.1f} MB"
    if size >= KB:
        return f"{size / KB:.1f} KB"
    return f"{size} B"


def truncate_line(line: str, width: int) -> str:
    """Cut a line to ``width`` columns, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if len(line) <= width:
        return line
    if width <= len(ELLIPSIS):
        return line[:width]
    return line[: width - len(ELLIPSIS)] + ELLIPSIS


class PreviewKind(Enum):
    """Terminal outcomes of classification, in decision order."""

    NONE = "none"
    BLOCKED = "blocked"
    DIRECTORY = "directory"
    TOO_LARGE = "too_large"
    IMAGE = "image"
    IMAGE_ERROR = "image_error"
    BINARY = "binary"
    TEXT = "text"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Preview:
    """What the preview pane should show."""

    kind: PreviewKind
    text: str = ""
    path: Optional[Path] = None
    image_size: Optional[Tuple[int, int]] = None
    image_format: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.kind == PreviewKind.IMAGE


class PreviewClassifier:
    """
    Classify entries for preview.

    Order: deny-list, directory, size limit, image extension, NUL sniff, text.
    """

    def __init__(
        self,
        max_size_mb: int = MAX_PREVIEW_SIZE_MB,
        blocked_names: Optional[Iterable[str]] = None,
        sniff_bytes: int = SNIFF_BYTES,
    ):
        """
        Initialize the classifier.

        Args:
            max_size_mb: Files larger than this are not previewed
            blocked_names: Exact file names never previewed
            sniff_bytes: Leading bytes checked for NUL
        """
        self.max_size_mb = max_size_mb
        self.max_size_bytes = max_size_mb * MB
        self.blocked_names: FrozenSet[str] = frozenset(
            DEFAULT_BLOCKED_NAMES if blocked_names is None else blocked_names
        )
        self.sniff_bytes = sniff_bytes

    def classify(
        self,
        entry: Optional[Entry],
        width: int,
        max_lines: Optional[int] = None,
    ) -> Preview:
        """
        Classify an entry.

        Args:
            entry: Selected entry (None when the listing is empty)
            width: Available columns for text lines
            max_lines: Stop reading text after this many lines

        Returns:
            Preview describing what to draw
        """
        if entry is None:
            return Preview(PreviewKind.NONE)

        path = entry.path
        if entry.name in self.blocked_names:
            return Preview(
                PreviewKind.BLOCKED,
                f"'{entry.name}' file is blocked from preview.",
                path=path,
            )

        if entry.is_dir:
            return Preview(PreviewKind.DIRECTORY, "Directory", path=path)

        try:
            size = path.stat().st_size
        except OSError as e:
            return self._unavailable(path, e)

        if size > self.max_size_bytes:
            return Preview(
                PreviewKind.TOO_LARGE,
                f"File is too large for preview ({format_size(size)}) "
                f"Max size is {self.max_size_mb} MB.",
                path=path,
            )

        if entry.suffix in IMAGE_EXTENSIONS:
            return self._classify_image(path)

        try:
            if self.is_binary(path):
                return Preview(
                    PreviewKind.BINARY, "Binary file, no preview available.", path=path
                )
            text = self.read_text(path, width, max_lines)
        except PreviewUnavailable as e:
            return Preview(PreviewKind.UNAVAILABLE, str(e), path=path)

        return Preview(PreviewKind.TEXT, text, path=path)

    def is_binary(self, path: Path) -> bool:
        """True when the first ``sniff_bytes`` bytes contain a NUL byte."""
        try:
            with open(path, "rb") as f:
                head = f.read(self.sniff_bytes)
        except OSError as e:
            raise PreviewUnavailable(f"Cannot read file: {e.strerror or e}") from e
        return b"\x00" in head

    def read_text(self, path: Path, width: int, max_lines: Optional[int] = None) -> str:
        """Read a text file with every line truncated to ``width``."""
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                lines = f if max_lines is None else islice(f, max_lines)
                return "\n".join(
                    truncate_line(line.rstrip("\r\n"), width) for line in lines
                )
        except OSError as e:
            raise PreviewUnavailable(f"Cannot read file: {e.strerror or e}") from e

    def _classify_image(self, path: Path) -> Preview:
        try:
            with Image.open(path) as img:
                img.load()
                image_format = img.format or path.suffix.lstrip(".").upper()
                size = img.size
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            logger.debug(f"Image decode failed for {path}: {e}")
            return Preview(PreviewKind.IMAGE_ERROR, "Could not load image", path=path)

        return Preview(
            PreviewKind.IMAGE,
            f"{image_format} image, {size[0]}x{size[1]}",
            path=path,
            image_size=size,
            image_format=image_format,
        )

    def _unavailable(self, path: Path, error: OSError) -> Preview:
        return Preview(
            PreviewKind.UNAVAILABLE,
            f"Cannot read file: {error.strerror or error}",
            path=path,
        )
