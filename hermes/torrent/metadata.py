from pathlib import Path

from bitarray import bitarray

from hermes.torrent.piece import Piece


class File:
    __slots__ = ("path", "size", "offset")

    def __init__(self, path: Path, size: int, offset: int):
        self.path = path
        self.size = size
        self.offset = offset  # in the concatenation of all files

    @property
    def end(self) -> int:
        return self.offset + self.size

    def __repr__(self):
        return f"File(path={str(self.path)!r}, size={self.size}, offset={self.offset})"


class Torrent:
    __slots__ = (
        "comment",
        "created_by",
        "encoding",
        "creation_date",
        "trackers",
        "is_private",
        "name",
        "piece_length",
        "pieces",
        "files",
        "info_hash",
    )

    def __init__(
        self,
        trackers: list[str],
        piece_length: int,
        pieces: list[Piece],
        files: list[File],
        info_hash: bytes | None,
        name: str = "",
        comment: str = "",
        created_by: str = "",
        encoding: str = "",
        creation_date: int | None = None,
        is_private: bool = False,
    ):
        self.trackers = trackers
        self.piece_length = piece_length
        self.pieces = pieces
        self.files = files
        self.info_hash = info_hash
        self.name = name
        self.comment = comment
        self.created_by = created_by
        self.encoding = encoding
        self.creation_date = creation_date
        self.is_private = is_private

    @property
    def announce(self) -> str:
        return self.trackers[0]

    @property
    def total_size(self) -> int:
        return sum(file.size for file in self.files)

    @property
    def piece_count(self) -> int:
        return len(self.pieces)

    def bitfield(self) -> bitarray:
        """One bit per piece, set for pieces whose data has been verified."""
        bits = bitarray(len(self.pieces))
        bits.setall(0)
        for piece in self.pieces:
            if piece.verified:
                bits[piece.index] = 1
        return bits

    def files_for_piece(self, index: int) -> list[File]:
        """Files whose bytes overlap the given piece, in torrent order."""
        piece = self.pieces[index]
        start, end = piece.offset, piece.offset + piece.size
        return [
            file
            for file in self.files
            if file.size > 0 and file.offset < end and file.end > start
        ]

    def __str__(self):
        return (
            f"Name: {self.name or '-'}\n"
            f"Size: {self.total_size} bytes in {len(self.files)} file(s)\n"
            f"Pieces: {self.piece_count} x {self.piece_length} bytes\n"
            f"Tracker: {self.announce}\n"
            f"Info hash: {self.info_hash.hex() if self.info_hash else '-'}"
        )
