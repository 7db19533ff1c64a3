"""String enums shared across the file store, action log and scoring engine."""

from enum import StrEnum
from typing import Self


class StrEnumWithDoc(StrEnum):
    """Base class for string enums whose members carry a description."""

    def __new__(cls, value: str, doc: str = "") -> Self:
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.__doc__ = doc
        return obj


class FileKind(StrEnumWithDoc):
    """Kinds of files present in the simulated file system."""

    PDF = "pdf", "PDF document"
    SPREADSHEET = "xlsx", "Excel spreadsheet"
    WORD = "docx", "Word document"
    PNG = "png", "PNG image"
    JPG = "jpg", "JPEG image"
    TEXT = "txt", "Plain text file"


class ActionKind(StrEnumWithDoc):
    NAVIGATE = "NAVIGATE", "The user changed the current folder"
    SEARCH = "SEARCH", "The user typed a query or changed a search filter"
    FILE_OPEN = "FILE_OPEN", "The user opened a file or folder"
    APP_OPEN = "APP_OPEN", "The user launched an application"


class AppKind(StrEnumWithDoc):
    FILE_EXPLORER = "FILE_EXPLORER", "File Explorer"
    NOTEPAD = "NOTEPAD", "Notepad"
    CALCULATOR = "CALCULATOR", "Calculator"


class SizeComparison(StrEnum):
    GT = "gt"
    LT = "lt"
