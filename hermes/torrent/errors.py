class TorrentError(Exception):
    """Base class for everything that can go wrong turning a file into a Torrent."""


class DecodeError(TorrentError):
    """Malformed bencoding. `offset` is the byte position where it was detected."""

    def __init__(self, reason: str, offset: int):
        super().__init__(f"{reason} at offset {offset}")
        self.reason = reason
        self.offset = offset


class MissingRequiredFieldError(TorrentError):
    """A required metainfo field is absent or holds the wrong kind of value."""

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field!r}")
        self.field = field


class InvalidFieldError(TorrentError):
    """A metainfo field is present with the right kind of value but is unusable."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid field {field!r}: {reason}")
        self.field = field
        self.reason = reason


class NewTorrentFromFileError(TorrentError):
    def __init__(self, path, cause: Exception):
        super().__init__(f"Error initializing torrent from file {str(path)!r}: {cause}")
        self.path = path
        self.cause = cause
