"""
Error types raised by the import pipeline and the record store.

Structural and field-level CSV problems are not exceptions: they are
accumulated into a ValidationReport. Only conditions that stop an
operation (or a single row write) are raised.
"""


class AgamottoError(Exception):
    """Base class for all application errors"""


class TimestampParseError(AgamottoError, ValueError):
    """Date/time cells could not be turned into an epoch timestamp"""


class TagLimitExceededError(AgamottoError):
    """No palette color is left for a new tag"""

    def __init__(self, tag_name: str, palette_size: int):
        self.tag_name = tag_name
        self.palette_size = palette_size
        super().__init__(
            f'Tag limit reached ({palette_size} tags). '
            f'Cannot create tag "{tag_name}" - delete an existing tag first.'
        )


class TagAlreadyExistsError(AgamottoError):
    """A tag with this name is already stored"""

    def __init__(self, tag_name: str):
        self.tag_name = tag_name
        super().__init__(f'Tag "{tag_name}" already exists')


class StoreWriteError(AgamottoError):
    """The record store rejected a write"""


class ActiveSessionConflictError(StoreWriteError):
    """Another session is already active or paused"""

    def __init__(self):
        super().__init__(
            "Another session is already active or paused. Only one active session allowed."
        )


class TagCreationError(StoreWriteError):
    """A new tag could not be written during reconciliation"""

    def __init__(self, tag_name: str, cause: Exception, created_names=None):
        self.tag_name = tag_name
        self.created_names = list(created_names or [])
        super().__init__(f'Failed to create tag "{tag_name}": {cause}')
