from pathlib import Path
import logging

from hermes.torrent.metadata import Torrent
from hermes.torrent.parser import load_torrent

logger = logging.getLogger(__name__)


class Client:
    """In-memory registry of the torrents added to this session, in insertion order."""

    __slots__ = ("torrents",)

    def __init__(self):
        self.torrents: list[Torrent] = []

    def add_torrent(self, torrent_file: Path) -> Torrent:
        """Load a .torrent file and append it. Raises NewTorrentFromFileError on failure."""
        torrent = load_torrent(torrent_file)
        self.torrents.append(torrent)
        logger.info(
            f"Added torrent {torrent.name!r} ({len(self.torrents)} in session)",
            extra={
                "info_hash": torrent.info_hash.hex() if torrent.info_hash else None,
                "torrent_path": str(torrent_file),
            },
        )
        return torrent

    def __len__(self):
        return len(self.torrents)
