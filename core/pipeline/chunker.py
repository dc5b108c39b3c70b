"""
Document chunking.

FixedSizeChunker cuts every `chunk_size` characters. ParagraphChunker
prefers to end a chunk on a blank line (then a newline) inside the
window so paragraphs and tables are not split mid-line.
"""

from dataclasses import dataclass
from typing import List

from config.constants import CHUNK_SIZE
from config.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Chunk:
    """
    Contiguous slice of the input.

    Attributes:
        index: Position of the chunk (0-based)
        raw_text: Chunk text
        is_first: First chunk of the document
        is_last: Last chunk of the document
        start_offset: Character offset of the chunk in the input
        start_line: Zero-based input line containing start_offset
    """
    index: int
    raw_text: str
    is_first: bool
    is_last: bool
    start_offset: int = 0
    start_line: int = 0

    @classmethod
    def whole(cls, text: str) -> "Chunk":
        """Single chunk covering the whole document."""
        return cls(index=0, raw_text=text, is_first=True, is_last=True)

    def __len__(self):
        return len(self.raw_text)


class FixedSizeChunker:
    """
    Split text into fixed-size character windows.

    Concatenating the chunks reproduces the input exactly.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size

    def split(self, text: str) -> List[Chunk]:
        if not text:
            return [Chunk.whole(text)]

        bounds = self._boundaries(text)
        chunks = []
        line = 0
        for index, (start, end) in enumerate(bounds):
            chunks.append(Chunk(
                index=index,
                raw_text=text[start:end],
                is_first=index == 0,
                is_last=index == len(bounds) - 1,
                start_offset=start,
                start_line=line,
            ))
            line += text.count('\n', start, end)

        logger.debug(f"Split {len(text):,} chars into {len(chunks)} chunks")
        return chunks

    def _boundaries(self, text: str) -> List[tuple]:
        return [
            (start, min(start + self.chunk_size, len(text)))
            for start in range(0, len(text), self.chunk_size)
        ]


class ParagraphChunker(FixedSizeChunker):
    """Chunk at the last paragraph break (or line break) in each window."""

    def _boundaries(self, text: str) -> List[tuple]:
        bounds = []
        start = 0
        while start < len(text):
            end = start + self.chunk_size
            if end >= len(text):
                bounds.append((start, len(text)))
                break

            cut = text.rfind('\n\n', start + 1, end)
            if cut != -1:
                end = cut + 2
            else:
                cut = text.rfind('\n', start + 1, end)
                if cut != -1:
                    end = cut + 1

            bounds.append((start, end))
            start = end
        return bounds


CHUNKERS = {
    "fixed": FixedSizeChunker,
    "paragraph": ParagraphChunker,
}


def get_chunker(strategy: str = "fixed", chunk_size: int = CHUNK_SIZE) -> FixedSizeChunker:
    """
    Chunker for a strategy name.

    Raises:
        ValueError: Unknown strategy
    """
    try:
        chunker_class = CHUNKERS[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown chunking strategy '{strategy}' (expected one of {sorted(CHUNKERS)})"
        ) from None
    return chunker_class(chunk_size)
