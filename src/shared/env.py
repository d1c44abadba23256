"""Environment utilities for resolving provider credentials from secret files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import MutableMapping, Optional

logger = logging.getLogger(__name__)

SECRET_FILE_SUFFIX = "_FILE"


def load_secret_file_variables(
    environ: Optional[MutableMapping[str, str]] = None,
) -> int:
    """
    Resolve environment variables that follow Docker secret conventions.

    For every ``KEY_FILE`` entry (e.g. ``WEATHER_API_KEY_FILE``) the referenced
    file is read and exposed as ``KEY`` unless ``KEY`` is already set. Read
    failures are logged and skipped; a missing provider key only disables the
    matching real-time signal.

    Returns:
        Number of variables resolved.
    """
    env = os.environ if environ is None else environ
    resolved = 0

    for key, file_path in list(env.items()):
        if not key.endswith(SECRET_FILE_SUFFIX) or not file_path:
            continue
        target_key = key[: -len(SECRET_FILE_SUFFIX)]
        if env.get(target_key):
            continue
        try:
            env[target_key] = Path(file_path).read_text(encoding="utf-8").strip()
            resolved += 1
        except FileNotFoundError as exc:
            logger.warning(
                "env.secret_file.missing",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )
        except UnicodeDecodeError as exc:
            logger.warning(
                "env.secret_file.decode_failed",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )
        except OSError as exc:
            logger.warning(
                "env.secret_file.load_failed",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )

    return resolved


load_secret_file_variables()
