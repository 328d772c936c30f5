from pathlib import Path

import bencodepy

from hermes.torrent.metadata import File, Torrent
from hermes.torrent.parser import parse_torrent
from hermes.torrent.piece import Piece


def test_file_end():
    file = File(Path("a"), 10, 30)

    assert file.end == 40


def test_bitfield_tracks_verified_pieces(multi_file_metainfo):
    torrent = parse_torrent(bencodepy.encode(multi_file_metainfo))

    assert torrent.bitfield().to01() == "000"

    torrent.pieces[1].verified = True
    assert torrent.bitfield().to01() == "010"


def test_files_for_piece(multi_file_metainfo):
    torrent = parse_torrent(bencodepy.encode(multi_file_metainfo))

    def names(files):
        return [file.path.name for file in files]

    # files occupy [0, 10), [10, 30), [30, 35); pieces are [0, 16), [16, 32), [32, 35)
    assert names(torrent.files_for_piece(0)) == ["one.txt", "two.txt"]
    assert names(torrent.files_for_piece(1)) == ["two.txt", "three.txt"]
    assert names(torrent.files_for_piece(2)) == ["three.txt"]


def test_files_for_piece_skips_empty_files():
    files = [File(Path("empty"), 0, 0), File(Path("data"), 4, 0)]
    torrent = Torrent(
        trackers=["http://t"],
        piece_length=4,
        pieces=[Piece(4, b"\x00" * 20)],
        files=files,
        info_hash=None,
    )

    assert torrent.files_for_piece(0) == [files[1]]


def test_summary(single_file_metainfo):
    torrent = parse_torrent(bencodepy.encode(single_file_metainfo))

    summary = str(torrent)

    assert "Name: a.txt" in summary
    assert "Pieces: 1 x 16384 bytes" in summary
    assert "Tracker: http://tracker.example.com/announce" in summary
    assert torrent.info_hash.hex() in summary
