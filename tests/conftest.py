import hashlib

import bencodepy
import pytest


def piece_hashes(count: int) -> bytes:
    return b"".join(hashlib.sha1(b"piece %d" % i).digest() for i in range(count))


@pytest.fixture
def single_file_metainfo():
    return {
        "announce": "http://tracker.example.com/announce",
        "comment": "test torrent",
        "created by": "hermes tests",
        "encoding": "UTF-8",
        "info": {
            "name": "a.txt",
            "length": 16384,
            "piece length": 16384,
            "pieces": piece_hashes(1),
        },
    }


@pytest.fixture
def multi_file_metainfo():
    return {
        "announce": "http://tracker.example.com/announce",
        "info": {
            "name": "album",
            "piece length": 16,
            "pieces": piece_hashes(3),
            "files": [
                {"path": ["disc1", "one.txt"], "length": 10},
                {"path": ["two.txt"], "length": 20},
                {"path": ["disc2", "three.txt"], "length": 5},
            ],
        },
    }


@pytest.fixture
def torrent_file(tmp_path, single_file_metainfo):
    path = tmp_path / "a.torrent"
    path.write_bytes(bencodepy.encode(single_file_metainfo))
    return path
