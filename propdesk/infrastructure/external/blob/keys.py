"""Object keys for uploaded blobs."""

import re
from pathlib import PurePosixPath

from propdesk.shared.utils import generate_cuid

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def blob_key(file_name: str) -> str:
    """Unique key '{cuid}/{safe-file-name}' so uploads never overwrite each other."""
    name = _UNSAFE.sub("_", PurePosixPath(file_name.replace("\\", "/")).name).strip("._")
    return f"{generate_cuid()}/{name or 'file'}"
