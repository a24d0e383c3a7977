"""CLI entry point for tokenbridge."""

import functools
import json
import sys
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .analyzer import ComponentAnalysis, analyze
from .catalog import CatalogError, TokenCatalog, TokenCategory, TypographyToken, get_default_catalog, load_catalog
from .config import ConfigError, TransformerConfig, load_config
from .files import ComponentFile
from .logger import setup_logging
from .repository import (
    DEFAULT_COMPONENT_PATTERN,
    SOURCE_TYPES,
    LocalDirectoryAccess,
    RepositoryAccess,
    RepositoryError,
    create_repository_access,
    write_component_files,
)
from .style_config import generate_css_variables, render_tailwind_config
from .transformer import transform

console = Console()


class State:
    """Options shared by every command."""

    def __init__(self, config: TransformerConfig, output_format: str, verbose: bool):
        self.config = config
        self.output_format = output_format
        self.verbose = verbose
        self._catalog: Optional[TokenCatalog] = None

    @property
    def catalog(self) -> TokenCatalog:
        if self._catalog is None:
            if self.config.catalog_path:
                self._catalog = load_catalog(self.config.catalog_path)
            else:
                self._catalog = get_default_catalog()
        return self._catalog

    @property
    def json(self) -> bool:
        return self.output_format == "json"


def fail(message: str, code: int = 1):
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    sys.exit(code)


def handle_errors(func):
    """Turn load and I/O errors into a message and exit code 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CatalogError, ConfigError, RepositoryError) as e:
            fail(str(e))
    return wrapper


def emit_json(data: Any):
    click.echo(json.dumps(data, indent=2))


# === SOURCE OPTIONS ===

def source_options(func):
    options = [
        click.option("--source", type=click.Choice(SOURCE_TYPES), default="local", show_default=True,
                     help="Where component files come from"),
        click.option("--path", "path", default=".", show_default=True,
                     help="Project root (local) or clone destination (clone)"),
        click.option("--repo-url", help="Repository URL to clone"),
        click.option("--branch", default="main", show_default=True, help="Branch to clone"),
        click.option("--owner", help="GitHub repository owner"),
        click.option("--repo", help="GitHub repository name"),
        click.option("--ref", default="main", show_default=True, help="GitHub ref"),
        click.option("--token", envvar="GITHUB_TOKEN", help="GitHub token (default: $GITHUB_TOKEN)"),
        click.option("--component-pattern", default=DEFAULT_COMPONENT_PATTERN, show_default=True,
                     help="Component location; must contain {componentName}"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def open_source(source: str, path: str, repo_url: Optional[str], branch: str, owner: Optional[str],
                repo: Optional[str], ref: str, token: Optional[str], component_pattern: str) -> RepositoryAccess:
    if source == "local":
        return create_repository_access("local", root=path, component_pattern=component_pattern)
    if source == "clone":
        if not repo_url:
            raise RepositoryError("--repo-url is required for --source clone")
        return create_repository_access(
            "clone", repo_url=repo_url, local_path=path, branch=branch,
            component_pattern=component_pattern,
        )
    if not owner or not repo:
        raise RepositoryError("--owner and --repo are required for --source github-api")
    return create_repository_access(
        "github-api", owner=owner, repo=repo, ref=ref, token=token,
        component_pattern=component_pattern,
    )


def select_components(access: RepositoryAccess, component: Optional[str], all_components: bool) -> List[str]:
    if all_components:
        return access.list_components()
    if not component:
        fail("Give a component name or --all")
    return [component]


# === COMMANDS ===

@click.group()
@click.version_option(__version__)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file (YAML)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              show_default=True, help="Output format")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], output_format: str, verbose: bool):
    """Rewrite hardcoded styles into design token references."""
    setup_logging(level="DEBUG" if verbose else "INFO", console=verbose)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        fail(str(e))
    ctx.obj = State(config, output_format, verbose)


@main.command()
@click.argument("category")
@click.pass_obj
@handle_errors
def tokens(state: State, category: str):
    """List every token in CATEGORY (color, border_radius, shadow, typography)."""
    items = state.catalog.list_tokens(category)
    if state.json:
        emit_json([t.to_dict() for t in items])
        return

    table = Table(title=f"{TokenCategory.parse(category).value} tokens ({len(items)})")
    table.add_column("Name", style="cyan")
    table.add_column("Alias")
    table.add_column("Value")
    table.add_column("Reference", style="dim")
    for token in items:
        table.add_row(token.name, token.alias, token.value, token.css_var())
    console.print(table)


@main.command()
@click.argument("category")
@click.argument("name")
@click.pass_obj
@handle_errors
def lookup(state: State, category: str, name: str):
    """Look up a token by NAME or alias."""
    token = state.catalog.lookup(category, name)
    if token is None:
        if state.json:
            emit_json({"found": False, "category": category, "query": name})
            sys.exit(1)
        fail(f"No {category} token named '{name}'")

    if state.json:
        emit_json({"found": True, **token.to_dict()})
        return
    console.print(f"[bold cyan]{token.name}[/bold cyan] ({token.alias})")
    console.print(f"  value:     {token.value}")
    console.print(f"  css var:   {token.css_var()}")
    console.print(f"  accessor:  {token.accessor()}")
    if isinstance(token, TypographyToken):
        console.print(f"  classes:   {escape(' '.join(token.classes))}")
    if token.usage:
        console.print(f"  usage:     {token.usage}")


@main.command("list")
@source_options
@click.pass_obj
@handle_errors
def list_components(state: State, **source):
    """List components in the repository."""
    access = open_source(**source)
    components = access.list_components()
    if state.json:
        emit_json(components)
        return
    console.print(f"[blue]Components ({len(components)}):[/blue]")
    for name in components:
        console.print(f"  {name}")


@main.command()
@click.argument("component")
@source_options
@click.pass_obj
@handle_errors
def show(state: State, component: str, **source):
    """Show the files of COMPONENT."""
    access = open_source(**source)
    files = access.get_component_files(component)
    if state.json:
        emit_json([f.to_dict() for f in files])
        return
    for file in files:
        lines = file.content.count("\n") + 1
        console.print(f"[bold]{file.path}[/bold] [dim]({lines} lines)[/dim]")


def print_analysis(component: str, analysis: ComponentAnalysis):
    console.print(f"[bold]{component}[/bold] [dim]({len(analysis.files_analyzed)} files)[/dim]")
    table = Table(show_header=True)
    table.add_column("Category")
    table.add_column("Count", justify="right")
    table.add_column("Values")
    rows = (
        ("Colors", analysis.colors + analysis.rgba_colors + analysis.color_classes),
        ("Border radii", analysis.border_radii),
        ("Shadows", analysis.shadows),
        ("Typography", analysis.typography),
        ("Variables", analysis.variable_references),
    )
    for label, values in rows:
        table.add_row(label, str(len(values)), escape(", ".join(values[:8])) + (" ..." if len(values) > 8 else ""))
    console.print(table)
    for error in analysis.errors:
        console.print(f"[yellow]Warning:[/yellow] {escape(error)}")


@main.command("analyze")
@click.argument("component", required=False)
@click.option("--all", "all_components", is_flag=True, help="Analyze every component")
@source_options
@click.pass_obj
@handle_errors
def analyze_command(state: State, component: Optional[str], all_components: bool, **source):
    """Find hardcoded style literals in COMPONENT."""
    access = open_source(**source)
    results: Dict[str, Any] = {}
    for name in select_components(access, component, all_components):
        analysis = analyze(access.get_component_files(name), extensions=state.config.presentational_extensions)
        if state.json:
            results[name] = analysis.to_dict()
        else:
            print_analysis(name, analysis)
    if state.json:
        emit_json(results)


@main.command("transform")
@click.argument("component", required=False)
@click.option("--all", "all_components", is_flag=True, help="Transform every component")
@click.option("--output", "-o", "output_dir", type=click.Path(file_okay=False),
              help="Write transformed files here instead of in place")
@click.option("--dry-run", is_flag=True, help="Report changes without writing files")
@click.option("--diff", "show_diff", is_flag=True, help="Print a unified diff")
@source_options
@click.pass_obj
@handle_errors
def transform_command(state: State, component: Optional[str], all_components: bool,
                      output_dir: Optional[str], dry_run: bool, show_diff: bool, **source):
    """Rewrite hardcoded style literals in COMPONENT into token references."""
    access = open_source(**source)
    results: Dict[str, Any] = {}
    failed = False

    for name in select_components(access, component, all_components):
        files: List[ComponentFile] = access.get_component_files(name)
        result = transform(files, catalog=state.catalog, config=state.config)
        failed = failed or bool(result.errors)

        changed = result.changed_files
        written: List[str] = []
        if changed and not dry_run:
            if output_dir:
                written = write_component_files(changed, output_dir)
            elif isinstance(access, LocalDirectoryAccess):
                written = write_component_files(changed, str(access.root))
            else:
                console.print("[yellow]Remote source: use --output to save transformed files[/yellow]")

        if state.json:
            data = result.to_dict()
            data["written"] = written
            if show_diff:
                data["diff"] = result.diff()
            results[name] = data
            continue

        summary = result.summary
        console.print(
            f"[bold]{name}[/bold]: {len(changed)} file(s) changed, "
            f"{summary.colors_transformed} colors, {summary.border_radii_transformed} radii, "
            f"{summary.shadows_transformed} shadows, {summary.typography_transformed} typography"
        )
        for file_result in result.file_results:
            for replacement in file_result.replacements:
                console.print(
                    f"  [dim]{escape(file_result.original.path)}[/dim] {escape(replacement.original)} -> "
                    f"[green]{escape(replacement.replacement)}[/green] ({escape(replacement.reason)})",
                    highlight=False,
                )
        if show_diff and changed:
            console.print(Syntax(result.diff(), "diff", word_wrap=True))
        for error in result.errors:
            console.print(f"[red]{escape(error)}[/red]")
        if dry_run and changed:
            console.print("[dim]Dry run: no files written[/dim]")

    if state.json:
        emit_json(results)
    if failed:
        sys.exit(1)


@main.command()
@click.argument("target", type=click.Choice(["tailwind", "css"]))
@click.option("--output", "-o", "output_file", type=click.Path(dir_okay=False), help="Write to file")
@click.pass_obj
@handle_errors
def generate(state: State, target: str, output_file: Optional[str]):
    """Generate a Tailwind config or CSS custom properties from the catalog."""
    if target == "tailwind":
        text = render_tailwind_config(state.catalog)
    else:
        text = generate_css_variables(state.catalog, tailwind_directives=True)

    if output_file:
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            fail(f"Failed to write {output_file}: {e}")
        console.print(f"[green]Wrote {output_file}[/green]")
    else:
        click.echo(text, nl=False)


if __name__ == "__main__":
    main()
