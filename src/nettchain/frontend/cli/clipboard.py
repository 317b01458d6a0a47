"""Clipboard helper so encrypted blobs can be pasted without echoing them.

Uses pyperclip for cross-platform clipboard access.
"""

from __future__ import annotations

import pyperclip

from nettchain.core.exceptions import NettChainError


def copy_to_clipboard(text: str) -> None:
    """Copy ``text`` to the system clipboard.

    Raises:
        NettChainError: If no clipboard mechanism is available.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise NettChainError(f"clipboard unavailable: {exc}") from exc
