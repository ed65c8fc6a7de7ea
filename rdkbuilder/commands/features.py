import click
from ..registry import REGISTRY
from ..config import DEFAULT_FEATURES

@click.command()
def features():
    """List the recognized feature flags and the native libraries they control."""
    click.echo("Feature flags:")
    for name in REGISTRY.flags:
        info = REGISTRY.describe(name)
        marker = " (default)" if name in DEFAULT_FEATURES else ""
        click.echo(f"  {name:<18} {info.description}{marker}")
        if info.requires:
            click.echo(f"  {'':<18}   requires: {', '.join(sorted(info.requires))}")
        if info.conflicts_with:
            click.echo(f"  {'':<18}   conflicts with: {', '.join(sorted(info.conflicts_with))}")

    click.echo("")
    click.echo("Optional dependencies:")
    for dep in REGISTRY.dependencies:
        sub_flags = [flag for flag in (dep.static_flag, dep.dynamic_flag) if flag]
        details = [dep.default_policy.value, "vendored" if dep.vendored else "system only"]
        if sub_flags:
            details.append("sub-flags: " + ", ".join(sub_flags))
        click.echo(f"  {dep.name:<10} enabled by '{dep.enable_flag}' ({'; '.join(details)})")
