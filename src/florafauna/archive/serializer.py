"""Serialize an archive tree into a single ZIP container."""

import io
import logging
import zipfile

from florafauna.archive.exceptions import ArchiveSerializationError
from florafauna.archive.tree import ArchiveDirectory

logger = logging.getLogger(__name__)


def serialize_archive(root: ArchiveDirectory) -> bytes:
    """Write the whole tree, root directory included, into a deflated ZIP.

    Args:
        root: Archive root; its name becomes the top-level folder in the container

    Returns:
        ZIP file bytes

    Raises:
        ArchiveSerializationError: If the container cannot be produced
    """
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as z:
            for path, node in root.walk():
                if isinstance(node, ArchiveDirectory):
                    z.writestr(zipfile.ZipInfo(path), b"")
                else:
                    z.writestr(path, node.content)
    except (OSError, ValueError, MemoryError, zipfile.LargeZipFile) as e:
        raise ArchiveSerializationError(f"Failed to serialize archive: {e}") from e

    data = buffer.getvalue()
    logger.info("Serialized archive %s (%d bytes)", root.name, len(data))
    return data
