"""Format tabular data into a text table for print.

the `tabulate` function takes a `pyarrow.RecordBatch` or `pyarrow.Table`
and formats it into a text table.
It will truncate long strings, format floats to 2 decimal places,
show missing values as ``NA`` and limit the number of rows to display.
The function is used to preview dataframes and to render the
tables of the lessons.

Example:

    >>> import pyarrow as pa
    >>> data = {
    ...     "species_id": ["DM", "DO", "PE"],
    ...     "sex": ["F", "M", None],
    ...     "weight": [42.5, 48.0, 21.25],
    ... }
    >>> table = pa.RecordBatch.from_pydict(data)
    >>> print(tabulate(table))
    species_id | sex | weight
    ---------- | --- | ------
    DM         | F   | 42.50
    DO         | M   | 48.00
    PE         | NA  | 21.25
"""

from typing import Any

from pyarrow import RecordBatch, Table

NULL_REPR = "NA"


def tabulate(
    data: RecordBatch | Table,
    max_rows: int = 20,
    float_digits: int = 2,
    markdown: bool = False,
) -> str:
    """Format a RecordBatch or Table into a text table.

    Will produce a string like::

        species_id | sex | weight
        ---------- | --- | ------
        DM         | F   | 42.50
        DO         | M   | 48.00

    When ``markdown`` is enabled, rows are also
    delimited by pipes so that the result is a valid markdown table.
    """
    cols = data.column_names
    rows = [
        [format_value(row[c], float_digits, escape_pipes=markdown) for c in cols]
        for row in data.slice(0, max_rows).to_pylist()
    ]

    colsizes = compute_max_colsize(cols, rows)
    header = [maketablerow(cols, colsizes=colsizes, markdown=markdown)]
    separator = [
        maketablerow(
            ["-"] * len(cols), colsizes=colsizes, fillvalue="-", markdown=markdown
        )
    ]
    textrows = [maketablerow(row, colsizes=colsizes, markdown=markdown) for row in rows]

    table = "\n".join(header + separator + textrows)
    if data.num_rows > max_rows:
        table += f"\n... and {data.num_rows - max_rows} more rows"
    return table


def compute_max_colsize(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Compute the maximum size of each column in a table."""
    return [
        max([len(row[colidx]) for row in rows] + [len(cols[colidx]), 3])
        for colidx, _ in enumerate(cols)
    ]


def maketablerow(
    cols: list[str], colsizes: list[int], fillvalue: str = " ", markdown: bool = False
) -> str:
    """Make a table row with the given column sizes."""
    row = " | ".join(
        [col.ljust(colsizes[idx], fillvalue) for idx, col in enumerate(cols)]
    )
    if markdown:
        return f"| {row} |"
    return row.rstrip()


def format_value(v: Any, float_digits: int = 2, escape_pipes: bool = False) -> str:
    """Format a value to be printed in the table.

    This function will format floats to ``float_digits`` decimal places,
    show missing values as ``NA`` and truncate long strings.
    """
    if v is None:
        return NULL_REPR
    elif isinstance(v, bool):
        return "true" if v else "false"
    elif isinstance(v, float):
        return f"{v:.{float_digits}f}"

    v = str(v)
    if len(v) > 30:
        v = v[:27] + "..."
    if escape_pipes:
        v = v.replace("|", "\\|")
    return v
