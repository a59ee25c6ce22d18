"""Document loaders — thin wrappers around LangChain text loaders.

Loaded files become ``{name: text}`` entries where the name is the file
stem, which also becomes the passage id prefix and, with
``namespace="auto"``, the target namespace.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from langchain_community.document_loaders import DirectoryLoader, TextLoader

logger = logging.getLogger(__name__)


def _add_document(documents: dict[str, str], name: str, text: str, source: str) -> None:
    if name in documents:
        logger.warning("Duplicate document name %r; keeping %s", name, source)
    documents[name] = text


def load_file(path: str | Path, encoding: str = "utf-8") -> str:
    """Load a single text file and return its content."""
    docs = TextLoader(str(path), encoding=encoding).load()
    return "\n".join(d.page_content for d in docs)


def load_directory(path: str | Path, glob: str = "**/*.txt") -> dict[str, str]:
    """Recursively load text files under *path*, sorted by path.

    Parameters
    ----------
    path:
        Root directory containing source documents.
    glob:
        File-matching pattern forwarded to ``DirectoryLoader``.

    Returns
    -------
    dict[str, str]
        Document name → text.  A later file with the same stem replaces an
        earlier one (a warning is logged).
    """
    loader = DirectoryLoader(
        str(path),
        glob=glob,
        loader_cls=TextLoader,  # type: ignore[arg-type]
        loader_kwargs={"encoding": "utf-8"},
        show_progress=False,
        use_multithreading=False,
    )
    docs = sorted(loader.load(), key=lambda d: d.metadata.get("source", ""))

    documents: dict[str, str] = {}
    for doc in docs:
        source = doc.metadata.get("source", "document")
        _add_document(documents, Path(source).stem, doc.page_content, source)
    return documents


def load_paths(paths: Iterable[str | Path], glob: str = "**/*.txt") -> dict[str, str]:
    """Load a mix of files and directories into one ordered mapping."""
    documents: dict[str, str] = {}
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            for name, text in load_directory(p, glob=glob).items():
                _add_document(documents, name, text, str(p))
        elif p.is_file():
            _add_document(documents, p.stem, load_file(p), str(p))
        else:
            raise FileNotFoundError(f"No such file or directory: {raw}")
    logger.info("Loaded %d documents", len(documents))
    return documents
