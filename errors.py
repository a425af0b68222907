"""Exceptions raised by jsontable."""


class JsonTableError(Exception):
    """Base exception for all jsontable errors"""
    pass


class DocumentParseError(JsonTableError):
    """Document text is not a valid JSON tree"""
    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.line = line
        self.column = column


class PathMismatch(JsonTableError):
    """A navigation label does not fit the node it is applied to"""
    def __init__(self, message: str, label: str | None = None):
        super().__init__(message)
        self.label = label


class ExportError(JsonTableError):
    """Flattening or serialising an export failed"""
    pass


class RequestError(JsonTableError):
    """A host message is missing fields or carries the wrong types"""
    pass
