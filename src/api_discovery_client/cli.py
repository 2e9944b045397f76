"""CLI entry point for api-discovery-client."""

import logging
from pathlib import Path

import click

from api_discovery_client.client import APIClient
from api_discovery_client.errors import APIClientError
from api_discovery_client.parser.document import parse_document


def _parse_params(pairs: tuple[str, ...]) -> dict:
    """Turn `-p name=value` pairs into parameters; repeated names become lists."""
    params: dict = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep:
            raise click.BadParameter(f"expected name=value, got {pair!r}", param_hint="-p")
        if name in params:
            existing = params[name]
            params[name] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            params[name] = value
    return params


def _load_document(client: APIClient, document: Path | None) -> tuple[str, str] | None:
    """Register a local discovery document; returns its (name, version)."""
    if document is None:
        return None
    doc = parse_document(document.read_text(encoding="utf-8"))
    name, version = doc.get("name"), doc.get("version")
    if not name or not version:
        raise click.ClickException(f"{document} is not a discovery document (missing name/version).")
    client.register_discovery_document(name, version, doc)
    return name, version


def _build_request(client: APIClient, method_id: str, api: str | None, version: str | None, document: Path | None, params: tuple[str, ...], body: Path | None, unauthenticated: bool):
    registered = _load_document(client, document)
    if registered is not None:
        api = api or registered[0]
        version = version or registered[1]
    return client.generate_request(
        method_id,
        _parse_params(params),
        body.read_bytes() if body is not None else None,
        {"Content-Type": "application/json"} if body is not None else None,
        api_name=api,
        version=version,
        authenticated=not unauthenticated,
    )


request_options = [
    click.argument("method_id"),
    click.option("--api", default=None, help="API name (defaults to the first segment of METHOD_ID)."),
    click.option("--version", "api_version", default=None, help="API version (defaults to the preferred one)."),
    click.option("--document", default=None, type=click.Path(exists=True, path_type=Path), help="Local discovery document to use."),
    click.option("-p", "--param", "params", multiple=True, help="Parameter as name=value; repeat for more."),
    click.option("--body", default=None, type=click.Path(exists=True, path_type=Path), help="File holding a JSON request body."),
    click.option("--unauthenticated", is_flag=True, help="Do not sign the request."),
]


def _with_request_options(func):
    for option in reversed(request_options):
        func = option(func)
    return func


@click.group()
@click.option("--key", default=None, help="API key sent with discovery and API requests.")
@click.option("--user-ip", default=None, help="End-user IP sent with discovery and API requests.")
@click.option("--access-token", default=None, envvar="DISCOVERY_CLIENT_ACCESS_TOKEN", help="OAuth 2 access token.")
@click.option("-v", "--verbose", is_flag=True, help="Log discovery and request activity.")
@click.pass_context
def main(ctx: click.Context, key: str | None, user_ip: str | None, access_token: str | None, verbose: bool):
    """API Discovery Client: explore and call APIs described by discovery documents."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    client = APIClient(key=key, user_ip=user_ip)
    if access_token:
        client.authorization = "oauth_2"
        client.authorization.access_token = access_token
    ctx.obj = client


@main.command()
@click.pass_obj
def apis(client: APIClient):
    """List the APIs known to the directory service."""
    try:
        items = client.discovered_apis()
    except APIClientError as e:
        raise click.ClickException(str(e)) from e
    for item in items:
        marker = " [preferred]" if item.preferred else ""
        click.echo(f"{item.name} {item.version}{marker}")


@main.command()
@click.argument("api")
@click.option("--version", "api_version", default=None, help="API version (defaults to the preferred one).")
@click.option("--document", default=None, type=click.Path(exists=True, path_type=Path), help="Local discovery document to use.")
@click.pass_obj
def methods(client: APIClient, api: str, api_version: str | None, document: Path | None):
    """List the methods of an API."""
    try:
        registered = _load_document(client, document)
        if registered is not None and api_version is None and registered[0] == api:
            api_version = registered[1]
        description = client.discovered_api(api, api_version)
    except APIClientError as e:
        raise click.ClickException(str(e)) from e

    for method_id, method in sorted(description.methods_by_id().items()):
        click.echo(f"{method_id}  {method.http_method} {method.path}")


@main.command()
@_with_request_options
@click.pass_obj
def request(client: APIClient, method_id, api, api_version, document, params, body, unauthenticated):
    """Print the request that would be sent for METHOD_ID."""
    try:
        req = _build_request(client, method_id, api, api_version, document, params, body, unauthenticated)
    except APIClientError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"{req.http_method} {req.uri}")
    for name, value in req.headers.items():
        click.echo(f"{name}: {value}")


@main.command()
@_with_request_options
@click.pass_obj
def execute(client: APIClient, method_id, api, api_version, document, params, body, unauthenticated):
    """Send the request for METHOD_ID and print the response."""
    try:
        req = _build_request(client, method_id, api, api_version, document, params, body, unauthenticated)
        result = client.execute(req)
    except APIClientError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"HTTP {result.status}")
    if result.body:
        click.echo(result.body.decode("utf-8", errors="replace"))
    if not result.is_success:
        click.get_current_context().exit(1)
