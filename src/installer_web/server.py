"""Lifecycle of the loopback server that backs the installer UI.

The server is started on a daemon thread. Creation blocks until that thread has
bound its listening socket and handed the concrete address back, so callers can
point the UI at ``get_addr()`` immediately. There is no stop method: the server
lives until the UI asks to exit (``GET /api/exit``) or the process ends.
"""

from __future__ import annotations

import logging
import queue
import socket
import threading
from dataclasses import dataclass

import uvicorn

from installer_web.app import TerminateHook, create_app, terminate_process
from installer_web.assets import AssetResolver
from installer_web.installer import InstallerFramework

logger = logging.getLogger(__name__)

LOOPBACK_HOST = "127.0.0.1"


class BindError(OSError):
    """The listening socket could not be bound."""


@dataclass(frozen=True)
class ServerAddress:
    host: str
    port: int

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"http://{host}:{self.port}/"


def bind_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    return socket.create_server((host, port), family=family)


class WebServer:
    def __init__(self, *, addr: ServerAddress, thread: threading.Thread) -> None:
        self._addr = addr
        self._thread = thread

    @classmethod
    def new(
        cls,
        framework: InstallerFramework,
        *,
        assets: AssetResolver | None = None,
        exit_hook: TerminateHook | None = None,
    ) -> WebServer:
        """Start a server on a random free port on localhost."""

        return cls.with_addr(framework, (LOOPBACK_HOST, 0), assets=assets, exit_hook=exit_hook)

    @classmethod
    def with_addr(
        cls,
        framework: InstallerFramework,
        addr: tuple[str, int],
        *,
        assets: AssetResolver | None = None,
        exit_hook: TerminateHook | None = None,
    ) -> WebServer:
        """Start a server on ``addr``; port 0 lets the OS choose.

        Raises BindError if the address cannot be bound.
        """

        host, port = addr
        on_exit = exit_hook if exit_hook is not None else terminate_process
        handoff: queue.Queue[ServerAddress | Exception] = queue.Queue(maxsize=1)
        loop = _ServeLoop(host=host, port=port, handoff=handoff, exit_hook=on_exit)

        app = create_app(framework, assets, on_terminate=loop.request_exit)
        thread = threading.Thread(
            target=loop.run,
            args=(app,),
            name=f"installer-web-{port}",
            daemon=True,
        )
        thread.start()

        result = handoff.get()
        if isinstance(result, Exception):
            thread.join()
            # Out-of-range ports surface as OverflowError, malformed hosts as ValueError.
            if isinstance(result, (OSError, OverflowError, ValueError)):
                errno = getattr(result, "errno", None)
                raise BindError(errno, f"Unable to bind {host}:{port}: {result}") from result
            raise result

        logger.info(f"Installer UI server listening on {result.url}")
        return cls(addr=result, thread=thread)

    def get_addr(self) -> ServerAddress:
        """Return the bound address that the server is running from."""

        return self._addr

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the serving thread ends; returns False on timeout."""

        self._thread.join(timeout)
        return not self._thread.is_alive()


class _ServeLoop:
    def __init__(
        self,
        *,
        host: str,
        port: int,
        handoff: queue.Queue[ServerAddress | Exception],
        exit_hook: TerminateHook,
    ) -> None:
        self._host = host
        self._port = port
        self._handoff = handoff
        self._exit_hook = exit_hook
        self._server: uvicorn.Server | None = None
        self._exit_code: int | None = None

    def request_exit(self, exit_code: int) -> None:
        self._exit_code = exit_code
        if self._server is not None:
            # Stop accepting; in-flight requests get a short grace period.
            self._server.should_exit = True

    def run(self, app) -> None:
        sock: socket.socket | None = None
        try:
            sock = bind_socket(self._host, self._port)
            bound_host, bound_port = sock.getsockname()[:2]
            config = uvicorn.Config(
                app,
                host=bound_host,
                port=bound_port,
                lifespan="off",
                log_config=None,
                access_log=False,
                timeout_graceful_shutdown=2,
            )
            self._server = uvicorn.Server(config)
        except Exception as e:
            # The creator is blocked on the handoff; it must always get an answer.
            if sock is not None:
                sock.close()
            self._handoff.put(e)
            return

        self._handoff.put(ServerAddress(host=bound_host, port=bound_port))

        try:
            self._server.run(sockets=[sock])
        except Exception:
            logger.exception("Installer UI server stopped unexpectedly")
            return
        finally:
            sock.close()

        if self._exit_code is not None:
            self._exit_hook(self._exit_code)
