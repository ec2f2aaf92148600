# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Window handles for documents and the frames they contain.

A Window exposes ``document``, ``location.href`` and ``frames`` the way a
browser window does. Frames that point to another origin are represented by
CrossOriginFrame, whose document can not be accessed. No network I/O is done:
only local files are ever loaded.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set
from urllib.parse import unquote, urljoin, urlparse
from urllib.request import url2pathname

from bs4 import BeautifulSoup, Tag

from aria_validator.utils.logging_helper import FrameAccessError, setup_logger

logger = setup_logger(__name__)

ABOUT_BLANK = "about:blank"
ABOUT_SRCDOC = "about:srcdoc"
FRAME_TAGS = ["iframe", "frame"]


@dataclass(frozen=True)
class Location:
    href: Optional[str] = None


class Window:
    """A document together with its location and child frames."""

    def __init__(
        self,
        document: Tag,
        url: Optional[str] = None,
        frames: Optional[List["Window"]] = None,
    ):
        self._document = document
        self.location = Location(url)
        self.frames: List["Window"] = list(frames or [])

    @property
    def document(self) -> Tag:
        return self._document

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.location.href!r}, frames={len(self.frames)})"


class CrossOriginFrame(Window):
    """A frame from another origin; reading its document raises FrameAccessError."""

    def __init__(self, url: Optional[str] = None):
        super().__init__(None, url)

    @property
    def document(self) -> Tag:
        raise FrameAccessError(f"Blocked access to the document of cross-origin frame {self.location.href}")


def get_origin(url: Optional[str]):
    parsed = urlparse(url or "")
    return parsed.scheme.lower(), parsed.netloc.lower()


def load_window(
    path: str,
    url: Optional[str] = None,
    parser: str = "html.parser",
    _seen: Optional[Set[str]] = None,
) -> Window:
    """
    Build a Window from a local HTML file, including the frames it references.

    Args:
        path: Path to the HTML file
        url: The URL the document is served from; the file URL when not given.
            Frames are same-origin when they resolve to this URL's origin.
        parser: BeautifulSoup tree builder

    Returns:
        The window for the file, with a window per iframe/frame element

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = os.path.abspath(path)
    if url is None:
        url = Path(path).as_uri()
    seen = set(_seen or ()) | {path}

    with open(path, "r", encoding="utf-8") as f:
        document = BeautifulSoup(f.read(), parser)

    frames = _load_frames(document, path, url, parser, seen)
    logger.debug("Loaded %s with %d frame(s)", url, len(frames))
    return Window(document, url, frames)


def _load_frames(document: Tag, path: str, url: str, parser: str, seen: Set[str]) -> List[Window]:
    return [_load_frame(frame, path, url, parser, seen) for frame in document.find_all(FRAME_TAGS)]


def _load_frame(frame: Tag, parent_path: str, parent_url: str, parser: str, seen: Set[str]) -> Window:
    if frame.has_attr("srcdoc"):
        # an inline document resolves its own frames against the parent
        document = BeautifulSoup(frame["srcdoc"], parser)
        return Window(document, ABOUT_SRCDOC, _load_frames(document, parent_path, parent_url, parser, seen))

    src = (frame.get("src") or "").strip()
    if not src or src == ABOUT_BLANK:
        return Window(BeautifulSoup("", parser), ABOUT_BLANK)

    frame_url = urljoin(parent_url, src)
    if get_origin(frame_url) != get_origin(parent_url):
        logger.debug("Frame %s is cross-origin", frame_url)
        return CrossOriginFrame(frame_url)

    frame_path = _local_path(src, frame_url, parent_path)
    if frame_path is None or not os.path.isfile(frame_path):
        logger.warning("Can not load frame %s, checking it as an empty document", frame_url)
        return Window(BeautifulSoup("", parser), frame_url)
    if frame_path in seen:
        logger.warning("Frame %s includes itself, not loading it again", frame_url)
        return Window(BeautifulSoup("", parser), frame_url)
    return load_window(frame_path, frame_url, parser, seen)


def _local_path(src: str, frame_url: str, parent_path: str) -> Optional[str]:
    """Map a same-origin frame to a local file next to its parent document."""
    parsed_src = urlparse(src)
    if parsed_src.scheme == "file":
        return url2pathname(parsed_src.path)
    if parsed_src.scheme or parsed_src.netloc:
        return None
    if parsed_src.path.startswith("/"):
        if urlparse(frame_url).scheme == "file":
            return url2pathname(parsed_src.path)
        return None
    return os.path.normpath(os.path.join(os.path.dirname(parent_path), unquote(parsed_src.path)))
