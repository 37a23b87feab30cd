"""
RADIT CLI

Build the registration authority tree from IANA registries, look up
single registrations, and show the active configuration.
"""
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from radit import __version__
from radit.authority import ContactPolicy
from radit.builder import RADIT, ImportList
from radit.config import RADITConfig, reload_config
from radit.export import export_to_json
from radit.utils import RADITError, get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


def _load_config(config_path, **overrides) -> RADITConfig:
    config = reload_config(config_path)
    updates = {k: v for k, v in overrides.items() if v is not None}
    if updates:
        config = config.model_copy(update=updates)
    setup_logging(config.log_level, config.log_file)
    return config


def _assemble(config: RADITConfig) -> RADIT:
    dit = RADIT.from_config(config)
    dit.prime_all()
    imports = ImportList(smi_file=config.smi_file, ldap_file=config.ldap_file, pen_file=config.pen_file)
    dit.import_registries(imports)
    if config.sort_by_number:
        dit.sort()
    return dit


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version=__version__)
def main():
    """
    RADIT - Registration Authority Directory Information Tree

    Assembles the OID tree from the IANA SMI Numbers, LDAP Parameters
    and Private Enterprise Numbers registries.
    """
    pass


_source_options = [
    click.option('--smi', 'smi_file', type=click.Path(path_type=Path), help='SMI Numbers XML registry'),
    click.option('--ldap', 'ldap_file', type=click.Path(path_type=Path), help='LDAP Parameters XML registry'),
    click.option('--pen', 'pen_file', type=click.Path(path_type=Path), help='Enterprise numbers text registry'),
    click.option('--policy', 'contact_policy', type=click.Choice([p.value for p in ContactPolicy]),
                 help='Contact policy (dedicated or combined)'),
    click.option('--config', 'config_path', type=click.Path(path_type=Path), help='YAML config file'),
]


def source_options(func):
    for option in reversed(_source_options):
        func = option(func)
    return func


# ═══════════════════════════════════════════════════════════════════
# BUILD COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@source_options
@click.option('--no-sort', is_flag=True, help='Keep children in allocation order')
@click.option('--output', '-o', 'output_path', type=click.Path(path_type=Path), help='Output JSON file')
def build(smi_file, ldap_file, pen_file, contact_policy, config_path, no_sort, output_path):
    """Build the tree and write it as JSON"""
    console.print("\n[bold blue]Building registration tree[/bold blue]")

    try:
        config = _load_config(
            config_path,
            smi_file=smi_file,
            ldap_file=ldap_file,
            pen_file=pen_file,
            contact_policy=ContactPolicy(contact_policy) if contact_policy else None,
            sort_by_number=False if no_sort else None,
            output_path=output_path,
        )
        with console.status("[bold green]Importing registries..."):
            dit = _assemble(config)
        path = export_to_json(dit.tree, dit.authorities, dit.policy, config.output_path)
    except RADITError as e:
        console.print(f"\n[red]✗ Error: {escape(str(e))}[/red]")
        raise SystemExit(1)

    table = Table(title="Build Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("Registrations", str(dit.tree.node_count))
    table.add_row("Authorities", str(len(dit.authorities)))
    table.add_row("Contact policy", dit.policy.value)
    console.print(table)

    console.print(f"\n[green]✓ Saved to {path}[/green]")


@main.command()
@click.argument('oid')
@source_options
def lookup(oid, smi_file, ldap_file, pen_file, contact_policy, config_path):
    """Show one registration by dotted OID"""
    try:
        config = _load_config(
            config_path,
            smi_file=smi_file,
            ldap_file=ldap_file,
            pen_file=pen_file,
            contact_policy=ContactPolicy(contact_policy) if contact_policy else None,
        )
        dit = _assemble(config)
        node = dit.lookup(oid)
    except (RADITError, ValueError) as e:
        console.print(f"\n[red]✗ Error: {escape(str(e))}[/red]")
        raise SystemExit(1)

    if node is None:
        console.print(f"\n[yellow]No registration for {oid}[/yellow]")
        raise SystemExit(1)

    table = Table(title=node.dot_notation)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Identifier", node.identifier)
    table.add_row("ASN.1", node.asn1_notation)
    table.add_row("Description", node.description)
    table.add_row("Status", node.status.value)
    if node.range_terminus is not None:
        table.add_row("Range", "and up" if node.range_terminus < 0 else str(node.range_terminus))
    for info in node.info:
        table.add_row("Info", info)
    for uri in node.uris:
        table.add_row("URI", uri)
    for authority_id in node.authority_ids:
        table.add_row("Authority", authority_id)
    if not node.contact.is_empty():
        table.add_row("Contact", ", ".join(v for v in node.contact.to_dict().values() if v))
    table.add_row("Children", str(len(node.children)))
    console.print(table)


# ═══════════════════════════════════════════════════════════════════
# STATUS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.option('--config', 'config_path', type=click.Path(path_type=Path), help='YAML config file')
def status(config_path):
    """Show configuration and primed skeleton size"""
    try:
        config = _load_config(config_path)
        dit = RADIT.from_config(config)
        primed = dit.prime_all()
    except RADITError as e:
        console.print(f"\n[red]✗ Error: {escape(str(e))}[/red]")
        raise SystemExit(1)

    table = Table(title="RADIT Status")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    for name in ("smi_file", "ldap_file", "pen_file", "contact_policy", "sort_by_number", "output_path"):
        value = getattr(config, name)
        table.add_row(name, str(value.value if isinstance(value, ContactPolicy) else value))
    table.add_row("primed registrations", str(primed))
    table.add_row("skeleton nodes", str(dit.tree.node_count))
    console.print(table)


if __name__ == '__main__':
    main()
