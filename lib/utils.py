# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import logging
import secrets
import string
import time
from typing import Callable
from uuid import UUID

logger = logging.getLogger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_lowercase
RANDOM_SUFFIX_LENGTH = 8


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        artwork_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        artwork_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Filename Utilities
# =============================================================================

def file_extension(filename: str) -> str:
    """
    Return the text after the last dot of a filename.

    A name without a dot is returned unchanged.
    """
    return filename.rsplit(".", 1)[-1]


def generate_unique_filename(original_name: str, timestamp_ms: int | None = None) -> str:
    """
    Build a storage key of the form <epoch-millis>-<8 base36 chars>.<ext>.

    The extension is taken from the original filename. Collisions need the
    same millisecond and the same random suffix; no retry is attempted.

    Example:
        generate_unique_filename("moon.png")  # "1718000000000-k3j9x0qa.png"
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
    return f"{timestamp_ms}-{suffix}.{file_extension(original_name)}"


def storage_key_from_url(url: str) -> str | None:
    """Last path segment of a public storage URL (query string dropped)."""
    name = url.split("?", 1)[0].rstrip("/").split("/")[-1]
    return name or None


# =============================================================================
# Compensation Log
# =============================================================================

class CompensationLog:
    """
    Ordered undo actions for a multi-step operation.

    Each completed step registers how to undo itself. On failure, rollback()
    runs the actions newest-first. An action that fails is logged and the
    remaining actions still run.

    Example:
        undo = CompensationLog("create artwork")
        url = upload(...)
        undo.add("remove uploaded image", lambda: remove(url))
        ...
        except Exception:
            undo.rollback()
    """

    def __init__(self, operation: str):
        self.operation = operation
        self._actions: list[tuple[str, Callable[[], object]]] = []

    def add(self, description: str, action: Callable[[], object]) -> None:
        self._actions.append((description, action))

    def __len__(self) -> int:
        return len(self._actions)

    @property
    def descriptions(self) -> list[str]:
        return [description for description, _ in self._actions]

    def rollback(self) -> list[str]:
        """
        Run every registered action in reverse order.

        Returns:
            Descriptions of the actions that failed
        """
        failed: list[str] = []
        while self._actions:
            description, action = self._actions.pop()
            try:
                action()
                logger.info(f"Compensated '{self.operation}': {description}")
            except Exception as e:
                logger.warning(f"Compensation failed for '{self.operation}' ({description}): {e}")
                failed.append(description)
        return failed
