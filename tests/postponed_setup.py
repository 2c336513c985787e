from __future__ import annotations

from typing import TYPE_CHECKING

from bootchain.container import Container
from bootchain.environment import Environment

if TYPE_CHECKING:
    from http.server import HTTPServer


def make_setup(received: list):
    def setup(container: Container, environment: Environment, server: HTTPServer = None):
        received.append((container, environment, server))

    return setup
