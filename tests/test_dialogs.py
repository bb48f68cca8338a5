from __future__ import annotations

import sys
import threading
import time
import types

from installer_web.dialogs import TkFolderPicker


class _TkTracker:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.live = 0
        self.max_live = 0

    def module(self) -> tuple[types.ModuleType, types.ModuleType]:
        tracker = self

        class TclError(Exception):
            pass

        class Tk:
            def __init__(self) -> None:
                with tracker.lock:
                    tracker.live += 1
                    tracker.max_live = max(tracker.max_live, tracker.live)

            def withdraw(self) -> None:
                pass

            def attributes(self, *args) -> None:
                pass

            def destroy(self) -> None:
                with tracker.lock:
                    tracker.live -= 1

        def askdirectory(**kwargs) -> str:
            time.sleep(0.05)
            return "/picked"

        filedialog = types.ModuleType("tkinter.filedialog")
        filedialog.askdirectory = askdirectory
        tkinter = types.ModuleType("tkinter")
        tkinter.Tk = Tk
        tkinter.TclError = TclError
        tkinter.filedialog = filedialog
        return tkinter, filedialog


def test_concurrent_dialogs_never_overlap(monkeypatch) -> None:
    tracker = _TkTracker()
    tkinter, filedialog = tracker.module()
    monkeypatch.setitem(sys.modules, "tkinter", tkinter)
    monkeypatch.setitem(sys.modules, "tkinter.filedialog", filedialog)

    picker = TkFolderPicker()
    results: list[str | None] = []

    def _pick() -> None:
        results.append(picker.pick_folder())

    threads = [threading.Thread(target=_pick) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert results == ["/picked"] * 4
    assert tracker.max_live == 1
    assert tracker.live == 0
