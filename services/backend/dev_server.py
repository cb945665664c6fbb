#!/usr/bin/env python3
"""
Local development server - picks the first free port in 8000-8006
"""
import socket

import uvicorn

from config import get_settings


def port_is_free(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind(("127.0.0.1", port))
        except OSError:
            return False
    return True


def pick_port(first: int = 8000, last: int = 8006) -> int:
    for port in range(first, last + 1):
        if port_is_free(port):
            return port
    raise RuntimeError(f"Ports {first}-{last} are all in use")


if __name__ == "__main__":
    settings = get_settings()
    port = pick_port()
    print(f"🚀 {settings.app_name} on http://127.0.0.1:{port}/docs")
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
