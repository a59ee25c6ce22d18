"""Heading-aware text chunking.

Documents are cut at lines that look like structural markers (``1.``,
``a.``, ``Two Capitalised`` words), short fragments are discarded, and
long sections can optionally be re-split on word boundaries.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Union

from doc_embedder.ingestion.models import Passage

logger = logging.getLogger(__name__)

MIN_SECTION_CHARS = 50
SOURCE_TAG = "document_embedder"

# Newline followed by "12.", "b." or "Capitalised Word"; the marker stays
# with the section that follows it.
SECTION_BOUNDARY = re.compile(r"\n(?=\d+\.|[a-z]\.|[A-Z][a-z]+ [A-Z])")

WORD_WITH_TRAILING_SPACE = re.compile(r"\S+\s*")

ChunkSize = Union[int, str]


def split_sections(content: str) -> list[str]:
    """Split *content* into untrimmed candidate sections."""
    if not content:
        return []
    return SECTION_BOUNDARY.split(content)


def split_large_section(text: str, max_size: int) -> list[str]:
    """Greedily pack whitespace-delimited words into chunks of at most *max_size* chars.

    Separators inside a chunk (spaces, newlines, tabs) are kept as written.
    A single word longer than *max_size* is emitted whole.
    """
    if len(text) <= max_size:
        return [text]

    chunks: list[str] = []
    current = ""
    for match in WORD_WITH_TRAILING_SPACE.finditer(text):
        token = match.group()
        candidate = current + token
        if current and len(candidate.rstrip()) > max_size:
            chunks.append(current.strip())
            current = token
        else:
            current = candidate

    if current.strip():
        chunks.append(current.strip())
    return chunks


def _validate_chunk_size(chunk_size: ChunkSize) -> None:
    if chunk_size == "auto":
        return
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise ValueError(f"chunk_size must be 'auto' or a positive integer, got {chunk_size!r}")


def chunk_document(
    content: str,
    doc_name: str,
    chunk_size: ChunkSize = "auto",
) -> list[Passage]:
    """Split *content* into ordered :class:`Passage` objects.

    Parameters
    ----------
    content:
        Raw document text.
    doc_name:
        Document identifier; used as the id prefix and ``docName`` metadata.
    chunk_size:
        ``"auto"`` keeps one passage per surviving section; an integer
        re-splits sections longer than that many characters.

    Returns
    -------
    list[Passage]
        Passages in reading order with dense ``chunk_index`` values.
    """
    _validate_chunk_size(chunk_size)
    logger.debug("Chunking %s document (%d chars)", doc_name, len(content or ""))

    passages: list[Passage] = []
    chunk_index = 0

    for section_index, raw_section in enumerate(split_sections(content)):
        section = raw_section.strip()
        if len(section) < MIN_SECTION_CHARS:
            continue

        if chunk_size != "auto" and len(section) > chunk_size:
            sub_chunks = split_large_section(section, chunk_size)
        else:
            sub_chunks = [section]

        for text in sub_chunks:
            word_count = len(text.split())
            passages.append(
                Passage(
                    id=f"{doc_name}_chunk_{chunk_index}",
                    text=text,
                    section_index=section_index,
                    chunk_index=chunk_index,
                    word_count=word_count,
                    metadata={
                        "docName": doc_name,
                        "chunkIndex": chunk_index,
                        "sectionIndex": section_index,
                        "wordCount": word_count,
                        "source": SOURCE_TAG,
                        "timestamp": datetime.now(timezone.utc).isoformat(),
                        "text": text,
                    },
                )
            )
            chunk_index += 1

    logger.info("Created %d chunks for %s", len(passages), doc_name)
    return passages
