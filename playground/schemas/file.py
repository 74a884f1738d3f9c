"""Project file schemas."""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, List

from .version import FileVersion


class Language(str, Enum):
    """Kind of content a file holds."""
    HTML = "html"
    CSS = "css"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"


# Extension groups drive both language inference and composition.
MARKUP_EXTENSIONS = (".html", ".htm")
STYLESHEET_EXTENSIONS = (".css",)
SCRIPT_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")

_LANGUAGE_BY_EXTENSION = {
    ".html": Language.HTML,
    ".htm": Language.HTML,
    ".css": Language.CSS,
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
}


def extension_of(name: str) -> str:
    """Lower-cased extension including the dot, or "" when there is none."""
    dot = name.rfind(".")
    if dot <= 0 or dot == len(name) - 1:
        return ""
    return name[dot:].lower()


def language_for_name(name: str) -> Optional[Language]:
    """Infer the language from a file name's extension."""
    return _LANGUAGE_BY_EXTENSION.get(extension_of(name))


class ProjectFile(BaseModel):
    """A named, typed unit of editable content with its own history."""
    id: str
    name: str
    language: Language
    content: str
    versions: List[FileVersion] = Field(min_length=1)


class FileCreate(BaseModel):
    """Schema for adding a file."""
    name: str
    language: Optional[Language] = None
    content: str = ""


class FileContentUpdate(BaseModel):
    """Schema for replacing a file's content."""
    content: str


class FileSummaryResponse(BaseModel):
    """File without its embedded history, for list views."""
    id: str
    name: str
    language: Language
    content: str
    version_count: int

    @classmethod
    def from_file(cls, file: ProjectFile) -> "FileSummaryResponse":
        return cls(
            id=file.id,
            name=file.name,
            language=file.language,
            content=file.content,
            version_count=len(file.versions),
        )


class FileCreatedResponse(BaseModel):
    id: str
