"""Reading and writing translation catalogs."""

import json
import os
import re
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import aiofiles
import aiofiles.os
import structlog

from ..errors import CatalogWriteError

logger = structlog.get_logger(__name__)

Catalog = Dict[str, Any]
PathLike = Union[str, Path]

# Language tag immediately before the extension: "es.json", "messages.en-US.json".
# The tag must not continue a longer word, so "notes.json" is not Spanish.
FILENAME_TAG_RE = re.compile(r"(?<![A-Za-z-])([a-z]{2}(?:-[A-Z]{2})?)\.json$")


def language_tag_from_filename(filename: str) -> Optional[str]:
    """Extract the language tag from a catalog filename.

    Args:
        filename: Base name of the file

    Returns:
        Tag such as ``"es"`` or ``"en-US"``, or None for non-catalog names
    """
    match = FILENAME_TAG_RE.search(filename)
    return match.group(1) if match else None


def target_filename(source_filename: str, target_tag: str) -> str:
    """Substitute ``target_tag`` for the language tag in ``source_filename``."""
    return FILENAME_TAG_RE.sub(f"{target_tag}.json", source_filename, count=1)


def is_catalog_filename(filename: str) -> bool:
    """Visible ``*.json`` files are candidate catalogs."""
    return filename.endswith(".json") and not filename.startswith(".")


def find_catalog_files(directory: PathLike) -> List[str]:
    """Catalog files anywhere under ``directory``, as sorted POSIX relative paths.

    Hidden directories are not descended into. A missing directory yields
    nothing.
    """
    directory = Path(directory)
    found = []
    for root, dirs, files in os.walk(directory):
        dirs[:] = [name for name in dirs if not name.startswith(".")]
        for name in files:
            if is_catalog_filename(name):
                found.append((Path(root) / name).relative_to(directory).as_posix())
    return sorted(found)


def dump_catalog(catalog: Catalog) -> str:
    """Serialize with stable, diff-friendly formatting (insertion order kept)."""
    return json.dumps(catalog, ensure_ascii=False, indent=2) + "\n"


async def write_text_atomic(path: PathLike, text: str) -> None:
    """Write ``text`` to a sibling temp file and move it over ``path``.

    Readers see either the old or the new document, never a partial one.
    """
    path = Path(path)
    tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
    try:
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(text)
            await f.flush()
        await aiofiles.os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


class CatalogStore:
    """Loads and saves catalogs as JSON documents."""

    async def load(self, path: PathLike) -> Catalog:
        """Read a catalog, treating unreadable or malformed files as empty.

        Args:
            path: Catalog file path

        Returns:
            Parsed catalog, or an empty dict on any read/parse failure
        """
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            logger.debug("Catalog not found, treating as empty", file=str(path))
            return {}
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read catalog", file=str(path), error=str(e))
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(
                "Malformed catalog, treating as empty",
                file=str(path),
                line=e.lineno,
                column=e.colno,
            )
            return {}
        except (ValueError, RecursionError) as e:
            # Oversized integers and pathologically deep nesting
            logger.warning("Unparseable catalog, treating as empty", file=str(path), error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.warning("Catalog is not a JSON object, treating as empty", file=str(path))
            return {}

        return data

    async def save(self, path: PathLike, catalog: Catalog) -> None:
        """Persist a catalog atomically.

        Raises:
            CatalogWriteError: If the document could not be written
        """
        try:
            await write_text_atomic(path, dump_catalog(catalog))
        except OSError as e:
            logger.error("Failed to write catalog", file=str(path), error=str(e))
            raise CatalogWriteError(
                f"Cannot write catalog {path}: {e}", path=str(path), previous_error=e
            ) from e

        logger.debug("Catalog saved", file=str(path))
