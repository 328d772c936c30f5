import hashlib
import logging
import math

logger = logging.getLogger(__name__)

BLOCK_SIZE = 16384  # 16KB standard request size
HASH_LENGTH = 20  # SHA-1 digest
MAX_PIECE_LENGTH = 2**26  # 64MB


class Block:
    __slots__ = ("size", "offset", "acquired")

    def __init__(self, size: int, offset: int = 0):
        self.size = size
        self.offset = offset  # relative to the start of the piece
        self.acquired = False

    def __repr__(self):
        return f"Block(size={self.size}, offset={self.offset}, acquired={self.acquired})"


class Piece:
    __slots__ = ("index", "offset", "size", "hash", "verified", "blocks")

    def __init__(self, size: int, hash: bytes, index: int = 0, offset: int = 0):
        if len(hash) != HASH_LENGTH:
            raise ValueError(
                f"Piece hash must be {HASH_LENGTH} bytes, got {len(hash)}"
            )
        if size <= 0:
            raise ValueError(f"Piece size must be positive, got {size}")

        self.index = index
        self.offset = offset  # in the torrent's virtual byte space
        self.size = size
        self.hash = bytes(hash)
        self.verified = False
        self.blocks = self._build_blocks(size)

    @staticmethod
    def _build_blocks(size: int) -> list[Block]:
        block_count = math.ceil(size / BLOCK_SIZE)
        blocks = [Block(BLOCK_SIZE, i * BLOCK_SIZE) for i in range(block_count)]

        remainder = size % BLOCK_SIZE
        if remainder:
            blocks[-1].size = remainder

        return blocks

    def is_complete(self) -> bool:
        return all(block.acquired for block in self.blocks)

    def verify(self, data: bytes) -> bool:
        """
        Check downloaded piece data against the expected SHA-1 digest.

        Marks the piece verified on success. Data of the wrong length never
        verifies.
        """
        if len(data) != self.size:
            logger.debug(
                f"Piece {self.index}: expected {self.size} bytes, got {len(data)}"
            )
            self.verified = False
            return False

        self.verified = hashlib.sha1(data).digest() == self.hash
        if not self.verified:
            logger.warning(f"Piece {self.index} failed hash check")
        return self.verified

    def __repr__(self):
        return (
            f"Piece(index={self.index}, size={self.size}, "
            f"blocks={len(self.blocks)}, verified={self.verified})"
        )
