from __future__ import annotations

import logging
import threading
from typing import Protocol

logger = logging.getLogger(__name__)

# Tcl/Tk tolerates one interpreter at a time across threads; concurrent requests queue here.
_TK_LOCK = threading.Lock()


class DialogError(RuntimeError):
    """The native dialog could not be shown."""


class FolderPicker(Protocol):
    def pick_folder(self, initial_dir: str | None = None) -> str | None:
        """Block until the user picks a directory; None when cancelled."""
        ...


class TkFolderPicker:
    """Native folder dialog backed by Tk.

    A hidden root window is created per call so the dialog can be opened from a
    worker thread while the request that triggered it waits.
    """

    def __init__(self, *, title: str = "Select install location") -> None:
        self._title = title

    def pick_folder(self, initial_dir: str | None = None) -> str | None:
        try:
            import tkinter
            from tkinter import filedialog
        except ImportError as e:
            raise DialogError("Tk is not available in this Python build") from e

        with _TK_LOCK:
            return self._pick_locked(tkinter, filedialog, initial_dir)

    def _pick_locked(self, tkinter, filedialog, initial_dir: str | None) -> str | None:
        try:
            root = tkinter.Tk()
        except tkinter.TclError as e:
            raise DialogError(f"Unable to open a display for the folder dialog: {e}") from e

        try:
            root.withdraw()
            root.attributes("-topmost", True)
            chosen = filedialog.askdirectory(
                parent=root,
                title=self._title,
                initialdir=initial_dir or None,
                mustexist=False,
            )
        except tkinter.TclError as e:
            raise DialogError(str(e)) from e
        finally:
            root.destroy()

        # askdirectory returns "" (or an empty tuple on some Tk builds) on cancel.
        if not chosen or not isinstance(chosen, str):
            logger.info("Folder selection cancelled")
            return None
        return chosen
