"""Exceptions raised by the converter and analyzer."""


class ArchiverError(Exception):
    def __init__(self, message: str | None = None):
        self.message = message or "Archive conversion failed"
        super().__init__(self.message)


class InputFileError(ArchiverError):
    """The export file is missing, unreadable, or not valid JSON. Fatal for the run."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"{reason}: {path}")


class InputShapeError(ArchiverError):
    """The export parsed, but its top level is not a list of conversations."""

    def __init__(self, found_type: str):
        self.found_type = found_type
        super().__init__(
            f"JSON file does not contain an array of conversations (found {found_type})"
        )


class MalformedRecordError(ArchiverError):
    """A single conversation record cannot be interpreted. Only that record is skipped."""

    def __init__(self, field: str, expected: str, found: object):
        self.field = field
        self.expected = expected
        super().__init__(
            f"Malformed conversation: '{field}' should be {expected}, got {type(found).__name__}"
        )


class OutputDirectoryError(ArchiverError):
    """The output directory cannot be created. Fatal for the run."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Could not create output directory {path} ({reason})")
