"""serve — run the gateway or the resolver under uvicorn."""

from __future__ import annotations

import click

from cepweather.commands._base import CepCommand
from cepweather.domain.types import ServiceName


@click.command(
    cls=CepCommand,
    examples="""\
  # Front gateway on the configured address (default 0.0.0.0:8081)
  cepweather serve gateway

  # Resolver with JSON logs on a custom port
  WEATHER_API_KEY=... cepweather --log-json serve resolver --port 9082

  # Gateway pointed at a local resolver
  CEPWEATHER_GATEWAY__RESOLVER_URL=http://127.0.0.1:8082 cepweather serve gateway""",
)
@click.argument("service", type=click.Choice([s.value for s in ServiceName]))
@click.option("--host", default=None, help="Bind address (defaults to the configured host).")
@click.option("--port", default=None, type=int, help="Listen port (defaults to the configured port).")
@click.pass_obj
def serve(app: object, service: str, host: str | None, port: int | None) -> None:
    """Start SERVICE (gateway or resolver)."""
    import uvicorn

    from cepweather.commands._context import AppContext

    assert isinstance(app, AppContext)
    name = ServiceName(service)
    default_host, default_port = app.bind_address(name)
    asgi_app = app.build_app(name)
    uvicorn.run(
        asgi_app,
        host=host or default_host,
        port=port or default_port,
        log_config=None,
    )
