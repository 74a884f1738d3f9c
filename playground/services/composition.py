"""Composition engine — file set in, one renderable document out.

Composition is purely textual: the root markup file is taken verbatim,
all stylesheets are concatenated into one inline ``<style>`` element and
all script files into one inline ``<script>`` element, each spliced in at
a fixed marker. Nothing is parsed or validated, and the output depends
only on the ordered file set, so repeated calls are byte-identical.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..exceptions import ErrorCode
from ..schemas import ProjectFile
from ..schemas.file import MARKUP_EXTENSIONS, SCRIPT_EXTENSIONS, STYLESHEET_EXTENSIONS

FALLBACK_ROOT = "<!DOCTYPE html><html><head></head><body></body></html>"

_HEAD_CLOSE = re.compile(r"</head\s*>", re.IGNORECASE)
_HTML_OPEN = re.compile(r"<html(?:\s[^>]*)?>", re.IGNORECASE)
_BODY_CLOSE = re.compile(r"</body\s*>", re.IGNORECASE)
_HTML_CLOSE = re.compile(r"</html\s*>", re.IGNORECASE)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompositionNotice:
    """A fallback the engine used; the document is still usable."""
    message: str
    code: str = ErrorCode.COMPOSITION_DEGRADED.value


@dataclass(frozen=True)
class ComposedDocument:
    html: str
    root_file_id: Optional[str]
    notices: List[CompositionNotice] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.notices)


def _has_extension(file: ProjectFile, extensions: Sequence[str]) -> bool:
    return file.name.lower().endswith(tuple(extensions))


def select_root(files: Sequence[ProjectFile]) -> Optional[ProjectFile]:
    """First markup file in insertion order, if any."""
    for file in files:
        if _has_extension(file, MARKUP_EXTENSIONS):
            return file
    return None


def _insert_styles(document: str, block: str, notices: List[CompositionNotice]) -> str:
    match = _HEAD_CLOSE.search(document)
    if match:
        return document[:match.start()] + block + document[match.start():]

    match = _HTML_OPEN.search(document)
    if match:
        notices.append(CompositionNotice("no </head> marker; styles inserted after <html>"))
        return document[:match.end()] + block + document[match.end():]

    notices.append(CompositionNotice("no </head> or <html> marker; styles inserted at document start"))
    return block + document


def _last_match(pattern: re.Pattern, document: str) -> Optional[re.Match]:
    last = None
    for last in pattern.finditer(document):
        pass
    return last


def _insert_scripts(document: str, block: str, notices: List[CompositionNotice]) -> str:
    match = _last_match(_BODY_CLOSE, document)
    if match:
        return document[:match.start()] + block + document[match.start():]

    match = _last_match(_HTML_CLOSE, document)
    if match:
        notices.append(CompositionNotice("no </body> marker; scripts inserted before </html>"))
        return document[:match.start()] + block + document[match.start():]

    notices.append(CompositionNotice("no </body> or </html> marker; scripts appended at document end"))
    return document + block


def compose(files: Sequence[ProjectFile]) -> ComposedDocument:
    """Compose the current file set into a single HTML document.

    Args:
        files: Project files in insertion order.

    Returns:
        The composed document with any fallback notices.
    """
    notices: List[CompositionNotice] = []

    root = select_root(files)
    if root is None:
        notices.append(CompositionNotice("no markup file; using an empty root document"))
        document = FALLBACK_ROOT
    elif not root.content:
        notices.append(CompositionNotice(f"{root.name} is empty; using an empty root document"))
        document = FALLBACK_ROOT
    else:
        document = root.content

    styles = [f.content for f in files if _has_extension(f, STYLESHEET_EXTENSIONS)]
    if styles:
        document = _insert_styles(document, "<style>" + "\n".join(styles) + "</style>", notices)

    scripts = [f.content for f in files if _has_extension(f, SCRIPT_EXTENSIONS)]
    if scripts:
        block = '<script type="text/javascript">' + "\n".join(scripts) + "</script>"
        document = _insert_scripts(document, block, notices)

    for notice in notices:
        logger.warning(
            "Composition degraded: %s", notice.message,
            extra={"error_code": notice.code, "root_file_id": root.id if root else None},
        )

    return ComposedDocument(html=document, root_file_id=root.id if root else None, notices=notices)
