import hashlib
import logging
from pathlib import Path

from hermes.torrent.bencoding import decode_dictionary
from hermes.torrent.errors import (
    InvalidFieldError,
    MissingRequiredFieldError,
    NewTorrentFromFileError,
    TorrentError,
)
from hermes.torrent.metadata import File, Torrent
from hermes.torrent.piece import HASH_LENGTH, MAX_PIECE_LENGTH, Piece
from hermes.torrent.value import ByteString, Dictionary, Integer, List, Value

logger = logging.getLogger(__name__)

UNSAFE_SEGMENTS = {"", ".", ".."}


def _require(data: Dictionary, field: str, kind: type[Value]):
    value = data.get(field)
    if not isinstance(value, kind):
        raise MissingRequiredFieldError(field)
    return value


def _optional(data: Dictionary, field: str, kind: type[Value]):
    # malformed optional metadata is treated as absent
    value = data.get(field)
    if not isinstance(value, kind):
        if value is not None:
            logger.debug(f"Ignoring {field!r}: expected {kind.__name__}, got {value!r}")
        return None
    return value


def _optional_text(data: Dictionary, field: str) -> str:
    value = _optional(data, field, ByteString)
    return value.text() if value is not None else ""


def _checked_segment(segment: str, field: str) -> str:
    if segment in UNSAFE_SEGMENTS or "/" in segment or "\\" in segment:
        raise InvalidFieldError(field, f"unsafe path segment {segment!r}")
    return segment


def _read_trackers(metainfo: Dictionary) -> list[str]:
    trackers = [_require(metainfo, "announce", ByteString).text()]

    # BEP 12 tiers, flattened in order
    announce_list = _optional(metainfo, "announce-list", List)
    for tier in announce_list or []:
        if not isinstance(tier, List):
            continue
        for url in tier:
            if isinstance(url, ByteString) and url.text() not in trackers:
                trackers.append(url.text())

    return trackers


def _read_private(info: Dictionary) -> bool:
    private = _optional(info, "private", Integer)
    return private is not None and private.value != 0


def _read_length(entry: Dictionary) -> int:
    length = _require(entry, "length", Integer).value
    if length < 0:
        raise InvalidFieldError("length", f"negative file size {length}")
    return length


def _read_path(entry: Dictionary) -> Path:
    segments = _require(entry, "path", List)
    if len(segments) == 0:
        raise InvalidFieldError("path", "empty path")

    parts = []
    for segment in segments:
        if not isinstance(segment, ByteString):
            raise InvalidFieldError("path", f"path segment is not a string: {segment!r}")
        parts.append(_checked_segment(segment.text(), "path"))
    return Path(*parts)


def _read_files(files: List) -> list[File]:
    result = []
    offset = 0
    for entry in files:
        if not isinstance(entry, Dictionary):
            logger.debug(f"Skipping file entry that is not a dictionary: {entry!r}")
            continue
        path = _read_path(entry)
        length = _read_length(entry)
        result.append(File(path, length, offset))
        offset += length
    return result


def _build_pieces(pieces_raw: bytes, piece_length: int, total_size: int) -> list[Piece]:
    if len(pieces_raw) % HASH_LENGTH:
        raise InvalidFieldError(
            "pieces", f"length {len(pieces_raw)} is not a multiple of {HASH_LENGTH}"
        )

    piece_count = -(-total_size // piece_length)
    hash_count = len(pieces_raw) // HASH_LENGTH
    if hash_count != piece_count:
        raise InvalidFieldError(
            "pieces",
            f"{hash_count} hashes for {piece_count} pieces "
            f"({total_size} bytes / {piece_length} bytes per piece)",
        )

    pieces = []
    for index in range(piece_count):
        offset = index * piece_length
        size = min(piece_length, total_size - offset)
        piece_hash = pieces_raw[index * HASH_LENGTH : (index + 1) * HASH_LENGTH]
        pieces.append(Piece(size, piece_hash, index=index, offset=offset))
    return pieces


def assemble(metainfo: Dictionary) -> Torrent:
    """
    Build a Torrent from a decoded metainfo dictionary.

    Required fields that are absent or of the wrong kind raise
    MissingRequiredFieldError; values that cannot describe a torrent (negative
    sizes, unsafe paths, piece hashes not matching the content size) raise
    InvalidFieldError. Malformed optional fields fall back to their defaults.
    """
    trackers = _read_trackers(metainfo)
    comment = _optional_text(metainfo, "comment")
    created_by = _optional_text(metainfo, "created by")
    encoding = _optional_text(metainfo, "encoding")
    creation_date = _optional(metainfo, "creation date", Integer)

    info = _require(metainfo, "info", Dictionary)
    is_private = _read_private(info)

    files_list = _optional(info, "files", List)
    if files_list is not None:
        name = _optional_text(info, "name")
        files = _read_files(files_list)
        logger.debug(f"Multi-file torrent {name!r} with {len(files)} files")
    else:
        name = _checked_segment(_require(info, "name", ByteString).text(), "name")
        files = [File(Path(name), _read_length(info), 0)]

    total_size = sum(file.size for file in files)

    piece_length = _require(info, "piece length", Integer).value
    if piece_length <= 0:
        raise InvalidFieldError("piece length", f"must be positive, got {piece_length}")
    if piece_length > MAX_PIECE_LENGTH:
        raise InvalidFieldError(
            "piece length", f"{piece_length} exceeds the {MAX_PIECE_LENGTH} byte limit"
        )

    pieces_raw = _require(info, "pieces", ByteString).value
    pieces = _build_pieces(pieces_raw, piece_length, total_size)

    info_hash = hashlib.sha1(info.raw).digest() if info.raw is not None else None

    return Torrent(
        trackers=trackers,
        piece_length=piece_length,
        pieces=pieces,
        files=files,
        info_hash=info_hash,
        name=name,
        comment=comment,
        created_by=created_by,
        encoding=encoding,
        creation_date=creation_date.value if creation_date is not None else None,
        is_private=is_private,
    )


def parse_torrent(data: bytes) -> Torrent:
    return assemble(decode_dictionary(data))


def load_torrent(path: Path) -> Torrent:
    """
    Read and parse a .torrent file.

    Any failure (unreadable file, malformed bencoding, missing or invalid
    fields) is raised as NewTorrentFromFileError chained to the underlying error.
    """
    path = Path(path)
    logger.info(f"Parsing torrent file: {path}")

    try:
        torrent = parse_torrent(path.read_bytes())
    except (OSError, TorrentError) as e:
        raise NewTorrentFromFileError(path, e) from e

    logger.info(
        f"Parsed torrent {torrent.name!r}: {len(torrent.files)} file(s), "
        f"{torrent.total_size} bytes, {torrent.piece_count} pieces"
    )
    return torrent
