"""Click commands for running an informer from the shell."""

from __future__ import annotations

import asyncio

import click

from kubeinformer.config import load_config
from kubeinformer.kinds import SUPPORTED_KINDS
from kubeinformer.models.config import InformerConfig
from kubeinformer.observability.logging import LOG_FORMATS


@click.group()
@click.version_option(package_name="kubeinformer")
def cli() -> None:
    """Resumable Kubernetes watch client."""


@cli.command()
@click.option(
    "--kind",
    type=click.Choice(sorted(SUPPORTED_KINDS), case_sensitive=False),
    help="Resource kind to watch.",
)
@click.option("--namespace", "-n", help="Namespace to watch. All namespaces when omitted.")
@click.option("--label-selector", "-l", help="Only watch objects matching this label selector.")
@click.option("--field-selector", help="Only watch objects matching this field selector.")
@click.option("--timeout", type=click.IntRange(1, 3600), help="Server-side watch timeout in seconds.")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Log level.",
)
@click.option("--log-format", type=click.Choice(list(LOG_FORMATS)), help="Log output format.")
def watch(
    kind: str | None,
    namespace: str | None,
    label_selector: str | None,
    field_selector: str | None,
    timeout: int | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Watch a resource kind and log every change until interrupted.

    Options override the matching KUBEINFORMER_* environment variables.
    """
    try:
        config = load_config()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    apply_overrides(
        config,
        kind=kind,
        namespace=namespace,
        label_selector=label_selector,
        field_selector=field_selector,
        timeout=timeout,
        log_level=log_level,
        log_format=log_format,
    )
    if config.watch.namespace and not SUPPORTED_KINDS[config.watch.kind].namespaced:
        raise click.UsageError(f"{config.watch.kind} is cluster-scoped; drop --namespace")

    from kubeinformer.app import main

    asyncio.run(main(config))


@cli.command()
def kinds() -> None:
    """List the resource kinds that can be watched."""
    for name, spec in sorted(SUPPORTED_KINDS.items()):
        scope = "namespaced" if spec.namespaced else "cluster"
        click.echo(f"{name}\t{scope}\t{spec.api}")


def apply_overrides(
    config: InformerConfig,
    *,
    kind: str | None = None,
    namespace: str | None = None,
    label_selector: str | None = None,
    field_selector: str | None = None,
    timeout: int | None = None,
    log_level: str | None = None,
    log_format: str | None = None,
) -> InformerConfig:
    """Overlay command-line options on *config*; unset options are ignored."""
    if kind is not None:
        config.watch.kind = kind.lower()
    if namespace is not None:
        config.watch.namespace = namespace
    if label_selector is not None:
        config.watch.label_selector = label_selector
    if field_selector is not None:
        config.watch.field_selector = field_selector
    if timeout is not None:
        config.watch.timeout_seconds = timeout
    if log_level is not None:
        config.log.level = log_level.lower()
    if log_format is not None:
        config.log.format = log_format
    return config
