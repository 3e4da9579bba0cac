"""Utilities for preparing polars data for the data table engine.

Covers the host side of both data modes: turning a (Lazy)DataFrame into
records and :class:`~reflex_data_table.models.Column` definitions for
client mode, and the search / sort / count / slice queries that server mode
runs against a LazyFrame instead of filtering in memory.
"""

from pathlib import Path
from typing import Any

import polars as pl

from reflex_data_table.models import Column, SortConfig

ID_FIELD: str = "id"
SOURCE_ID_FIELD: str = "source_id"


def _humanize_field_name(field: str) -> str:
    """Convert a snake_case or raw field name to a human-friendly header.

    Examples:
        ``"employee_name"`` -> ``"Employee Name"``
        ``"days"`` -> ``"Days"``
        ``"__row_id__"`` -> ``"Row Id"``
    """
    return field.strip("_").replace("_", " ").title()


_JSON_WRAPPER_PREFIX: str = '{"v":'


def _col_to_str_expr(col: pl.Expr, dtype: pl.DataType) -> pl.Expr:
    """Convert a column expression to a String, handling nested types.

    * ``List(T)`` / ``Array(T, n)`` / ``Struct`` -> compact JSON
      (``["a","b"]``), the form ``cells.stringify_value`` gives records in
      client mode.  Null stays null.
    * Everything else -> ``cast(pl.String)``
    """
    if isinstance(dtype, pl.Array):
        col = col.arr.to_list()
    if isinstance(dtype, (pl.List, pl.Array, pl.Struct)):
        # polars only JSON-encodes structs, so wrap the value and unwrap the text.
        encoded = (
            pl.struct(col.alias("v"))
            .struct.json_encode()
            .str.strip_prefix(_JSON_WRAPPER_PREFIX)
            .str.strip_suffix("}")
        )
        return pl.when(col.is_null()).then(pl.lit(None, dtype=pl.String)).otherwise(encoded)
    return col.cast(pl.String)


def _dataframe_to_dicts(df: pl.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame to a list of JSON-safe dicts.

    Temporal columns (Date, Datetime, Time, Duration) become ISO-8601
    strings.  Everything else is left as polars returns it, so numbers and
    booleans keep their type and pick up the numeric / badge formatting.
    """
    temporal_cols = {
        name
        for name, dtype in df.schema.items()
        if isinstance(dtype, (pl.Date, pl.Datetime, pl.Time, pl.Duration))
    }
    if not temporal_cols:
        return df.to_dicts()

    exprs: list[pl.Expr] = [
        pl.col(c).cast(pl.String) if c in temporal_cols else pl.col(c)
        for c in df.columns
    ]
    return df.select(exprs).to_dicts()


# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------

def build_columns_from_schema(
    schema: pl.Schema | dict[str, pl.DataType],
    *,
    column_descriptions: dict[str, str] | None = None,
    id_field: str | None = ID_FIELD,
    show_id_field: bool = False,
    sortable: bool = True,
) -> list[Column]:
    """Build :class:`Column` definitions from a polars schema without collecting data.

    Labels are humanized field names, numeric columns are right aligned.

    Args:
        schema: A polars ``Schema`` (e.g. ``lf.collect_schema()``).
        column_descriptions: Optional ``{column: description}`` mapping,
            shown as header tooltips.
        id_field: Name of the row identifier column.  Hidden unless
            *show_id_field* is ``True``.
        show_id_field: Whether to include the *id_field* column.
        sortable: Whether the columns are sortable.

    Returns:
        One column per schema field, in schema order.
    """
    descriptions = column_descriptions or {}
    columns: list[Column] = []
    for col_name, dtype in schema.items():
        if not show_id_field and col_name == id_field:
            continue
        columns.append(
            Column(
                key=col_name,
                label=_humanize_field_name(col_name),
                sortable=sortable,
                filterable=isinstance(dtype, (pl.String, pl.Categorical, pl.Enum)),
                align="right" if dtype.is_numeric() else "left",
                description=descriptions.get(col_name),
            )
        )
    return columns


def string_columns(schema: pl.Schema | dict[str, pl.DataType]) -> list[str]:
    """Return the names of the text-like columns (the default search keys)."""
    return [
        name
        for name, dtype in schema.items()
        if isinstance(dtype, (pl.String, pl.Categorical, pl.Enum))
    ]


# ---------------------------------------------------------------------------
# Client mode: materialise records
# ---------------------------------------------------------------------------

def _with_id(df: pl.DataFrame, id_field: str | None, offset: int) -> pl.DataFrame:
    """Make sure *df* carries an ``id`` column the table can use as row identity.

    * *id_field* given: that column is copied to ``id``.
    * an existing ``id`` column: kept when its values are unique in *df*,
      otherwise renamed to ``source_id``.
    * otherwise a 1-based row index starting at ``offset + 1`` is added.
    """
    if id_field is not None and id_field != ID_FIELD:
        if ID_FIELD in df.columns:
            df = df.rename({ID_FIELD: SOURCE_ID_FIELD})
        return df.with_columns(pl.col(id_field).alias(ID_FIELD))

    if ID_FIELD in df.columns:
        if id_field == ID_FIELD or df[ID_FIELD].n_unique() == df.height:
            return df
        df = df.rename({ID_FIELD: SOURCE_ID_FIELD})
    return df.with_row_index(ID_FIELD, offset=offset + 1)


def lazyframe_to_records(
    data: pl.LazyFrame | pl.DataFrame,
    *,
    id_field: str | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Collect a (Lazy)DataFrame into records for client mode.

    Every record gets a unique ``id`` (see :func:`_with_id`) and temporal
    values are converted to ISO strings.

    Args:
        data: The polars LazyFrame or DataFrame to convert.
        id_field: Column holding the row identity.  ``None`` keeps a unique
            ``id`` column or adds a row index.
        limit: Optional maximum number of rows to collect.

    Returns:
        A list of dicts, one per row.
    """
    lf = data.lazy() if isinstance(data, pl.DataFrame) else data
    if limit is not None:
        lf = lf.head(limit)
    df = _with_id(lf.collect(), id_field, offset=0)
    return _dataframe_to_dicts(df)


def columns_from_records(
    records: list[dict[str, Any]],
    **kwargs: Any,
) -> list[Column]:
    """Infer :class:`Column` definitions from a list of records.

    Keyword arguments are forwarded to :func:`build_columns_from_schema`.
    """
    if not records:
        return []
    schema = pl.DataFrame(records, infer_schema_length=None).schema
    return build_columns_from_schema(schema, **kwargs)


# ---------------------------------------------------------------------------
# Server mode: lazy queries
# ---------------------------------------------------------------------------

def apply_search(
    lf: pl.LazyFrame,
    query: str,
    keys: list[str] | tuple[str, ...],
    schema: pl.Schema | None = None,
) -> pl.LazyFrame:
    """Filter *lf* to rows where any of *keys* contains *query*.

    Case-insensitive literal substring match on the string form of each
    column, OR-combined across keys.  Nulls never match.  Keys that are not
    in the schema are ignored; with no usable key the frame is returned
    unchanged, as it is for an empty (or whitespace-only) query.

    Returns:
        The filtered ``pl.LazyFrame`` -- **no collect**.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return lf
    if schema is None:
        schema = lf.collect_schema()

    conditions: list[pl.Expr] = []
    for key in keys:
        dtype = schema.get(key)
        if dtype is None:
            continue
        text = _col_to_str_expr(pl.col(key), dtype).str.to_lowercase()
        conditions.append(text.str.contains(needle, literal=True).fill_null(False))

    if not conditions:
        return lf
    return lf.filter(pl.any_horizontal(conditions))


def apply_sort_config(
    lf: pl.LazyFrame,
    sort: SortConfig | None,
    schema: pl.Schema | None = None,
) -> pl.LazyFrame:
    """Sort *lf* by a single column, nulls last in both directions."""
    if sort is None:
        return lf
    if schema is None:
        schema = lf.collect_schema()
    if sort.key not in schema:
        return lf
    return lf.sort(sort.key, descending=sort.direction == "desc", nulls_last=True)


def count_rows(lf: pl.LazyFrame) -> int:
    """Count rows with a single ``select(pl.len())`` pushed into the scan."""
    return lf.select(pl.len()).collect().item()


def collect_page(
    lf: pl.LazyFrame,
    page: int,
    page_size: int,
    *,
    id_field: str | None = None,
) -> list[dict[str, Any]]:
    """Collect one page (1-based) of *lf* as records.

    Only the requested slice is materialised.  Without *id_field*, rows are
    identified by their 1-based position in the filtered and sorted result.
    """
    offset = (page - 1) * page_size
    page_df = lf.slice(offset, page_size).collect()
    if id_field is None and ID_FIELD in page_df.columns:
        page_df = page_df.rename({ID_FIELD: SOURCE_ID_FIELD})
    page_df = _with_id(page_df, id_field, offset=offset)
    return _dataframe_to_dicts(page_df)


# ---------------------------------------------------------------------------
# File scanner
# ---------------------------------------------------------------------------

SUPPORTED_SUFFIXES: tuple[str, ...] = (
    ".csv", ".tsv", ".parquet", ".pq", ".json", ".ndjson", ".jsonl",
    ".ipc", ".arrow", ".feather",
)


def scan_file(path: Path) -> pl.LazyFrame:
    """Scan a data file into a LazyFrame, picking the reader by extension.

    * ``.parquet`` / ``.pq`` -- ``pl.scan_parquet()``
    * ``.csv`` -- ``pl.scan_csv()``
    * ``.tsv`` -- ``pl.scan_csv(separator="\\t")``
    * ``.json`` -- ``pl.read_json().lazy()`` (no streaming scan)
    * ``.ndjson`` / ``.jsonl`` -- ``pl.scan_ndjson()``
    * ``.ipc`` / ``.arrow`` / ``.feather`` -- ``pl.scan_ipc()``

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file extension is not recognised.
    """
    path = Path(path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix in (".parquet", ".pq"):
        return pl.scan_parquet(path)
    if suffix == ".csv":
        return pl.scan_csv(path, try_parse_dates=True)
    if suffix == ".tsv":
        return pl.scan_csv(path, separator="\t", try_parse_dates=True)
    if suffix == ".json":
        return pl.read_json(path).lazy()
    if suffix in (".ndjson", ".jsonl"):
        return pl.scan_ndjson(path)
    if suffix in (".ipc", ".arrow", ".feather"):
        return pl.scan_ipc(path)

    raise ValueError(
        f"Unsupported file extension: {suffix!r}. "
        f"Supported: {', '.join(SUPPORTED_SUFFIXES)}"
    )
