"""CLI for reflex-data-table -- browse a tabular file in a paginated table.

Usage::

    # Browse a CSV / TSV / Parquet / JSON / Arrow file
    reflex-data-table view leave_logs.csv

    # Search only some columns, 25 rows per page
    reflex-data-table view attendance.parquet -k employee_name -k status --page-size 25

    # Load everything into memory instead of querying page by page
    reflex-data-table view small.csv --client-side

By default the file is browsed through ``DataTableMixin.set_table_lazyframe``
(server mode): search, sort and paging run as polars queries.
"""

import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Annotated, Optional

import typer

from reflex_data_table.models import DEFAULT_PAGE_SIZE

app = typer.Typer(
    name="reflex-data-table",
    help="Browse tabular data files in a searchable, paginated browser table.",
    no_args_is_help=True,
)


@app.callback()
def _root() -> None:
    """Browse tabular data files in a searchable, paginated browser table."""


def _detect_format(path: Path) -> str:
    """Detect file format from extension."""
    format_map: dict[str, str] = {
        ".csv": "csv",
        ".tsv": "tsv",
        ".parquet": "parquet",
        ".pq": "parquet",
        ".json": "json",
        ".ndjson": "ndjson",
        ".jsonl": "ndjson",
        ".ipc": "ipc",
        ".arrow": "ipc",
        ".feather": "ipc",
    }
    return format_map.get(path.suffix.lower(), "csv")


def _build_app_code(
    file_path: Path,
    page_size: int,
    search_keys: list[str],
    title: str,
    client_side: bool,
) -> str:
    """Generate the Reflex app module source code.

    Uses ``scan_file`` + ``DataTableMixin`` + ``data_table``, in server mode
    unless *client_side* is set.
    """
    abs_path = str(file_path.resolve())
    # Escape backslashes and quotes for embedding in Python string literal
    safe_path = abs_path.replace("\\", "\\\\").replace('"', '\\"')

    search_kwarg = f", search_keys={search_keys!r}" if search_keys else ""
    if client_side:
        loader = (
            "records = lazyframe_to_records(lf)\n"
            "        self.set_table_records(records, page_size=__PAGE_SIZE____SEARCH_KWARG__)"
        )
    else:
        loader = "yield from self.set_table_lazyframe(lf, page_size=__PAGE_SIZE____SEARCH_KWARG__)"

    # Use placeholder substitution to avoid escaping nightmares.
    template = _APP_TEMPLATE
    template = template.replace("__LOADER__", loader)
    template = template.replace("__FILENAME__", file_path.name)
    template = template.replace("__SAFE_PATH__", safe_path)
    template = template.replace("__PAGE_SIZE__", str(page_size))
    template = template.replace("__SEARCH_KWARG__", search_kwarg)
    template = template.replace("__TITLE__", title.replace('"', '\\"'))
    return template


# ---------------------------------------------------------------------------
# App template -- uses __PLACEHOLDER__ tokens for dynamic parts.
# ---------------------------------------------------------------------------

_APP_TEMPLATE = '''"""Auto-generated viewer app for: __FILENAME__"""

from pathlib import Path

import reflex as rx

from reflex_data_table import (
    DataTableMixin,
    data_table,
    lazyframe_to_records,
    scan_file,
)


class ViewerState(DataTableMixin, rx.State):
    """Viewer state using DataTableMixin."""

    def load_data(self):
        lf = scan_file(Path("__SAFE_PATH__"))
        __LOADER__


def index() -> rx.Component:
    return rx.box(
        rx.heading("__TITLE__", size="6", margin_bottom="0.5em"),
        rx.text(ViewerState.dt_stats, size="1", color="var(--gray-9)", margin_bottom="0.5em"),
        rx.cond(
            ViewerState.dt_loaded,
            data_table(ViewerState, show_row_numbers=True, sticky_header=True, height="70vh"),
            rx.text("Loading...", color="var(--gray-9)"),
        ),
        data_table.detail_box(ViewerState),
        padding="2em",
        max_width="1400px",
        margin="0 auto",
    )


app = rx.App()
app.add_page(index, on_load=ViewerState.load_data)
'''


@app.command()
def view(
    file: Annotated[Path, typer.Argument(help="Path to the data file (CSV, TSV, Parquet, JSON, NDJSON, Arrow)")],
    page_size: Annotated[int, typer.Option("--page-size", "-n", min=1, help="Rows per page")] = DEFAULT_PAGE_SIZE,
    search_key: Annotated[Optional[list[str]], typer.Option("--search-key", "-k", help="Column to search (repeatable); defaults to all text columns")] = None,
    title: Annotated[Optional[str], typer.Option("--title", "-t", help="Page title")] = None,
    port: Annotated[int, typer.Option("--port", "-p", help="Port for the Reflex frontend")] = 3000,
    client_side: Annotated[bool, typer.Option("--client-side", help="Load all rows into memory instead of querying page by page")] = False,
) -> None:
    """View a data file in a searchable, sortable, paginated table."""
    file = file.resolve()
    if not file.exists():
        typer.echo(f"Error: file not found: {file}", err=True)
        raise typer.Exit(code=1)

    fmt = _detect_format(file)

    if title is None:
        title = f"{file.name} -- Data Table"

    app_code = _build_app_code(file, page_size, search_key or [], title, client_side)

    # Create a temporary Reflex app directory.
    tmp_dir = Path(tempfile.mkdtemp(prefix="data_table_viewer_"))
    app_name = "viewer_app"
    app_pkg = tmp_dir / app_name
    app_pkg.mkdir()
    (app_pkg / "__init__.py").write_text("")
    (app_pkg / f"{app_name}.py").write_text(app_code)

    rxconfig_code = f"""import reflex as rx
config = rx.Config(app_name="{app_name}", frontend_port={port})
"""
    (tmp_dir / "rxconfig.py").write_text(rxconfig_code)

    mode = "client" if client_side else "server"
    typer.echo(f"Launching viewer for: {file}")
    typer.echo(f"Format: {fmt} | Mode: {mode} | Page size: {page_size} | Port: {port}")

    os.chdir(tmp_dir)

    # Step 1: initialise the Reflex project (creates .web/ with node_modules).
    # subprocess because reflex's CLI calls sys.exit() on completion.
    typer.echo("Initializing Reflex project...")
    subprocess.run(
        [sys.executable, "-m", "reflex", "init"],
        cwd=str(tmp_dir),
        check=True,
    )

    # Step 2: run the app via exec (replaces this process).
    typer.echo("Starting viewer...")
    os.execvp(sys.executable, [sys.executable, "-m", "reflex", "run"])


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
