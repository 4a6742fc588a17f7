"""Page persistence: save, load and JSON export.

The stored document is the page's JSON array form, the same shape as the
export. There is no schema versioning.
"""

import os
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from pagesmith.models.node import Page
from pagesmith.services.exceptions import PageLoadError
from pagesmith.tree import find_duplicate_ids

logger = structlog.get_logger()


def atomic_write(path: Path, content: str) -> None:
    """
    Atomically write content to file with temp-file-rename pattern.

    1. Write to temporary file in the target directory
    2. fsync to ensure data is on disk
    3. Atomic rename to replace original file

    Args:
        path: Target file path
        content: Content to write

    Raises:
        OSError: On file I/O errors
        PermissionError: On permission errors
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory keeps the rename on one filesystem
    temp_path = path.parent / f".{path.name}.tmp.{os.getpid()}"

    try:
        temp_path.write_text(content, encoding="utf-8")

        with open(temp_path, "r+", encoding="utf-8") as f:
            f.flush()
            os.fsync(f.fileno())

        temp_path.replace(path)

        logger.debug("atomic_write_success", path=str(path), size=len(content))

    except Exception as e:
        if temp_path.exists():
            temp_path.unlink()
        logger.error("atomic_write_failed", path=str(path), error=str(e))
        raise


class PageStore:
    """JSON file holding the page being edited.

    Example:
        >>> store = PageStore(Path("~/.local/share/pagesmith/page.json").expanduser())
        >>> store.save(page)
        >>> store.load() == page
        True
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[Page]:
        """Read the saved page.

        Returns:
            The page, or None if nothing has been saved yet

        Raises:
            PageLoadError: If the file is unreadable or not a valid page
        """
        if not self.path.exists():
            logger.info("page_not_found", path=str(self.path))
            return None

        try:
            page = Page.from_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.error("page_load_failed", path=str(self.path), error=str(e))
            raise PageLoadError(str(self.path), f"Failed to load saved page ({e})") from e

        duplicates = find_duplicate_ids(page)
        if duplicates:
            logger.error("page_load_failed", path=str(self.path), duplicate_ids=duplicates)
            raise PageLoadError(
                str(self.path),
                f"Saved page has duplicate node ids {', '.join(duplicates)}",
            )

        logger.info("page_loaded", path=str(self.path), nodes=len(page))
        return page

    def save(self, page: Page) -> None:
        atomic_write(self.path, page.to_json())
        logger.info("page_saved", path=str(self.path), nodes=len(page))


def export_json(page: Page, target: Path, default_name: str = "pagesmith-page.json") -> Path:
    """Write the page as indented JSON (the download/export form).

    Args:
        page: Page to export
        target: File path, or a directory to place the export in
        default_name: File name used when ``target`` is a directory

    Returns:
        Path actually written
    """
    if target.is_dir():
        target = target / default_name
    atomic_write(target, page.to_json(indent=2))
    logger.info("page_exported", path=str(target), nodes=len(page))
    return target
