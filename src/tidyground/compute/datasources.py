"""Pipeline nodes that load data

The datasource nodes are expected to fetch the data from some source,
convert it into the format accepted by the compute engine and forward it
to the next node in the pipeline.

They are used to do things like loading
data from CSV files or wrapping tables that
were already loaded in memory.
"""

import logging
from abc import abstractmethod

import pyarrow as pa
import pyarrow.csv

from .base import QueryPlanNode

log = logging.getLogger(__name__)


class DataSourceNode(QueryPlanNode):
    """Base class for nodes that load data from a source."""

    @abstractmethod
    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the data source without loading its content."""
        ...


class CSVDataSource(DataSourceNode):
    """Load data from a CSV file.

    Given a local CSV file path, load the content,
    convert it into Arrow format, and emit it
    for the next nodes of the pipeline to consume.

    The first row of the file is expected to be the header
    providing the column names. Empty cells and ``NA`` are
    read as missing values.
    """

    NULL_VALUES = ["", "NA", "N/A", "NaN", "null"]

    def __init__(self, filename: str, block_size: int | None = None) -> None:
        """
        :param filename: The path of the local CSV file.
        :param block_size: How big to make batches of data,
                           Influences how many batches will be produced
        """
        self.filename = filename
        self.block_size = block_size

    def __str__(self) -> str:
        return f"CSVDataSource({self.filename}, block_size={self.block_size})"

    def _convert_options(self) -> pa.csv.ConvertOptions:
        return pa.csv.ConvertOptions(
            null_values=self.NULL_VALUES, strings_can_be_null=True
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Open CSV file and emit the batches."""
        log.debug("Reading CSV file %s", self.filename)
        with pa.csv.open_csv(
            self.filename,
            read_options=pa.csv.ReadOptions(block_size=self.block_size),
            convert_options=self._convert_options(),
        ) as reader:
            emitted = False
            for batch in reader:
                emitted = True
                yield batch
            if not emitted:
                # A file with only the header still has columns.
                yield pa.RecordBatch.from_pylist([], schema=reader.schema)

    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the CSV file."""
        with pa.csv.open_csv(
            self.filename, convert_options=self._convert_options()
        ) as reader:
            return reader.schema


class PyArrowTableDataSource(DataSourceNode):
    """Load data from an in-memory pyarrow.Table or pyarrow.RecordBatch.

    Given a :class:`pyarrow.Table` or `pyarrow.RecordBatch` object,
    allow to use its data in a pipeline.
    """

    def __init__(self, table: pa.Table | pa.RecordBatch) -> None:
        """
        :param table: The table or recordbatch with the data to read.
        """
        self.table = table
        self.is_recordbatch = isinstance(table, pa.RecordBatch)

    def __str__(self) -> str:
        return f"PyArrowTableDataSource(columns={self.table.column_names}, rows={self.table.num_rows})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit the data contained in the Table for consumption by other node."""
        if self.is_recordbatch:
            yield self.table
        else:
            batches = self.table.to_batches()
            if not batches:
                batches = [pa.RecordBatch.from_pylist([], schema=self.table.schema)]
            yield from batches

    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the Table."""
        return self.table.schema
