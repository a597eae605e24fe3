"""
Server entry point.

Binds the configured port, moving to the next port while the address is in
use, then serves the app with uvicorn on the bound socket.

Command: backoffice  (or python -m backoffice.server)
"""
import errno
import logging
import socket
from typing import Tuple

import uvicorn

from backoffice.config import get_settings
from backoffice.exceptions import ConfigurationError
from backoffice.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def bind_socket(host: str, port: int, max_attempts: int) -> Tuple[socket.socket, int]:
    """
    Bind a listening TCP socket, trying port, port + 1, ... on "address in use".

    Args:
        host: Interface to bind
        port: Preferred port
        max_attempts: Number of ports to try

    Returns:
        (bound socket, port it is bound to)

    Raises:
        ConfigurationError: If every port tried is in use
    """
    for candidate in range(port, port + max_attempts):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, candidate))
        except OSError as e:
            sock.close()
            if e.errno != errno.EADDRINUSE:
                raise
            logger.info(f"Port {candidate} is busy, trying {candidate + 1}...")
            continue
        return sock, candidate

    raise ConfigurationError(
        f"No free port in {port}-{port + max_attempts - 1}",
        details={"port": port, "attempts": max_attempts}
    )


def run() -> None:
    settings = get_settings()
    setup_logging(settings)

    sock, port = bind_socket(settings.HOST, settings.PORT, settings.PORT_RETRY_LIMIT)
    logger.info(f"Server running on port {port}")
    if port != settings.PORT:
        logger.warning(f"Port {settings.PORT} was in use. Running on fallback port {port}.")
        logger.warning(f"Point clients at http://localhost:{port} if needed.")

    config = uvicorn.Config("backoffice.main:app", log_level=settings.LOG_LEVEL.lower())
    server = uvicorn.Server(config)
    server.run(sockets=[sock])


if __name__ == "__main__":
    run()
