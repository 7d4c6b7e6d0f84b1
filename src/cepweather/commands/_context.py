"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to subcommands via
``@click.pass_obj``. Configures logging up front; applications are built
lazily so ``--help`` and ``--version`` never touch the network or tracing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cepweather.domain.types import ServiceName

if TYPE_CHECKING:
    from fastapi import FastAPI

    from cepweather.config.settings import CepWeatherSettings


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: CepWeatherSettings) -> None:
        self.settings = settings

        from cepweather.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def build_app(self, service: ServiceName) -> FastAPI:
        """Create the ASGI application for *service* from the current settings."""
        if service is ServiceName.GATEWAY:
            from cepweather.api.gateway import create_gateway_app

            return create_gateway_app(self.settings)

        from cepweather.api.resolver import create_resolver_app

        return create_resolver_app(self.settings)

    def bind_address(self, service: ServiceName) -> tuple[str, int]:
        """Configured ``(host, port)`` for *service*."""
        section = self.settings.gateway if service is ServiceName.GATEWAY else self.settings.resolver
        return section.host, section.port
