import functools
import logging
from collections.abc import Callable
from typing import Any, NoReturn

import click
import yaml

from .backends import LocalFilesystem, OsReleaseFactProvider, StaticFactProvider, package_manager_for
from .catalog import build_catalog, sudoers_rule
from .config import load_settings
from .enforcer import Enforcer
from .errors import CatalogError, ConfigError, FactsError
from .models import Facts, FileResource, RunResult, Settings
from .reconcile import CatalogBuilder, ReconciliationRun
from .report import compute_run_rollup, format_outcomes, write_report

logger = logging.getLogger("ivanti_hostconfig")

EXIT_RESOURCE_FAILED = 1
EXIT_RUN_FAILED = 2


def _fail(message: str, code: int = EXIT_RUN_FAILED) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(code)


def facts_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Shared --os-family/--os-version/--facts options; detection is the default."""
    func = click.option("--facts", "facts_file", type=click.Path(exists=True, dir_okay=False), help="YAML facts file (flat or facter layout).")(func)
    func = click.option("--os-version", help="Override the detected OS version.")(func)
    func = click.option("--os-family", help="Override the detected OS family (RedHat, Suse, Debian).")(func)
    return func


def resolve_facts(os_family: str | None, os_version: str | None, facts_file: str | None) -> Facts:
    if facts_file and (os_family or os_version):
        raise click.UsageError("--facts cannot be combined with --os-family/--os-version")
    if os_family or os_version:
        if not (os_family and os_version):
            raise click.UsageError("--os-family and --os-version must be given together")
        provider = StaticFactProvider(os_family, os_version)
    elif facts_file:
        provider = StaticFactProvider.from_file(facts_file)
    else:
        provider = OsReleaseFactProvider()
    return provider.get_facts()


def _load_facts(os_family: str | None, os_version: str | None, facts_file: str | None) -> Facts:
    try:
        return resolve_facts(os_family, os_version, facts_file)
    except FactsError as exc:
        _fail(str(exc))


def _catalog_builder(settings: Settings) -> CatalogBuilder:
    return functools.partial(build_catalog, sudoers=sudoers_rule(**settings.sudoers.model_dump()))


def _reconciliation(facts: Facts, settings: Settings) -> ReconciliationRun:
    """Wire the host backends; raises ``CatalogError`` when no package manager fits the host."""
    packages = package_manager_for(facts, settings)
    return ReconciliationRun(
        Enforcer(packages, LocalFilesystem()),
        builder=_catalog_builder(settings),
        timeout_seconds=settings.timeout_seconds,
    )


def _echo_result(result: RunResult) -> None:
    for line in format_outcomes(result):
        click.echo(line)
    rollup = compute_run_rollup(result)
    counts = ", ".join(f"{k}={v}" for k, v in rollup["summary"].items())
    click.echo(f"{rollup['status']}: {counts}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug-level logging.")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Settings YAML file.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_file: str | None) -> None:
    """Converge a host to the Ivanti agent desired state."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )
    try:
        ctx.obj = load_settings(config_file)
    except ConfigError as exc:
        _fail(str(exc))


@main.command()
@facts_options
def facts(os_family: str | None, os_version: str | None, facts_file: str | None) -> None:
    """Print the facts a run would use."""
    host_facts = _load_facts(os_family, os_version, facts_file)
    click.echo(yaml.dump(host_facts.model_dump(mode="json"), default_flow_style=False, sort_keys=False), nl=False)


@main.command()
@facts_options
@click.pass_obj
def catalog(settings: Settings, os_family: str | None, os_version: str | None, facts_file: str | None) -> None:
    """Print the desired resources for this host, with rendered file content."""
    host_facts = _load_facts(os_family, os_version, facts_file)
    try:
        built = _catalog_builder(settings)(host_facts)
    except CatalogError as exc:
        _fail(str(exc))

    rows = []
    for resource in built.resources:
        row: dict[str, Any] = {"id": resource.resource_id, **resource.model_dump(mode="json", exclude={"content"})}
        if isinstance(resource, FileResource):
            row["content"] = resource.content.render()
        rows.append(row)
    click.echo(yaml.dump({"facts": host_facts.model_dump(mode="json"), "resources": rows}, default_flow_style=False, sort_keys=False), nl=False)


@main.command()
@facts_options
@click.pass_obj
def plan(settings: Settings, os_family: str | None, os_version: str | None, facts_file: str | None) -> None:
    """Show what `apply` would change, without changing anything."""
    host_facts = _load_facts(os_family, os_version, facts_file)
    try:
        result = _reconciliation(host_facts, settings).plan(host_facts)
    except CatalogError as exc:
        _fail(str(exc))
    if result.error is not None:
        _fail(result.error)
    _echo_result(result)
    if result.failed:
        raise SystemExit(EXIT_RESOURCE_FAILED)


@main.command()
@facts_options
@click.option("--report", "report_path", type=click.Path(dir_okay=False), help="Write the run result as YAML.")
@click.pass_obj
def apply(settings: Settings, os_family: str | None, os_version: str | None, facts_file: str | None, report_path: str | None) -> None:
    """Converge the host: install missing packages and (re)write the sudoers drop-in."""
    host_facts = _load_facts(os_family, os_version, facts_file)
    try:
        reconciliation = _reconciliation(host_facts, settings)
    except CatalogError as exc:
        logger.error("Cannot reconcile %s %s: %s", host_facts.os_family, host_facts.os_version, exc)
        result = RunResult(facts=host_facts, mode="apply", error=str(exc)).finish()
    else:
        result = reconciliation.run(host_facts)

    report_path = report_path or settings.report_path
    if report_path:
        write_report(result, report_path)
        logger.debug("Run report written to %s", report_path)

    if result.error is not None:
        _fail(result.error)
    _echo_result(result)
    if result.failed:
        raise SystemExit(EXIT_RESOURCE_FAILED)


@main.command()
@facts_options
@click.pass_obj
def verify(settings: Settings, os_family: str | None, os_version: str | None, facts_file: str | None) -> None:
    """Check that every package is installed and the sudoers rule is present."""
    host_facts = _load_facts(os_family, os_version, facts_file)
    try:
        violations = _reconciliation(host_facts, settings).verify(host_facts)
    except CatalogError as exc:
        _fail(str(exc))

    if violations:
        for violation in violations:
            click.echo(f"FAIL {violation}")
        raise SystemExit(EXIT_RESOURCE_FAILED)
    click.echo("OK: host is converged")


if __name__ == "__main__":
    main()
