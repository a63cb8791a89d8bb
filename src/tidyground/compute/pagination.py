"""Support limiting or skipping data in a pipeline.

Implements nodes whose purpose is to slice the data
emitted by a pipeline. Discarding the rows that
are not part of the selected slice of data.

This is what powers ``head()`` and the previews
of the tables shown in lessons.
"""

from typing import Iterator

import pyarrow as pa

from .base import QueryPlanNode


class PaginateNode(QueryPlanNode):
    """Emit only one page of the received data.

    Given a starting index and a length, only emit
    length rows after the starting index is reached.

    For example if ``offset=1`` and ``length=1``
    only the second row will be emitted::

        0: skip because < offset
        1: emit
        2: skip because > length=1 and one row was already emitted.

    When the page ends up empty, an empty batch is emitted
    so that consumers still know the columns of the data.
    """

    def __init__(self, offset: int, length: int, child: QueryPlanNode) -> None:
        """
        :param offset: From which row to take data, first row is 0.
        :param length: How many rows to take after offset was reached.
        :param child: the node from which to consume the rows.
        """
        if offset < 0 or length < 0:
            raise ValueError("Offset and length must not be negative")

        self.offset = offset
        self.length = length
        self.end = offset + length
        self.child = child

    def __str__(self) -> str:
        return f"PaginateNode({self.offset}:{self.end}, {self.child})"

    def batches(self) -> Iterator[pa.RecordBatch]:
        """Apply the pagination to the child node and emit the rows.

        Consume rows from the child node skipping those until we
        reach offset. Once offset is reached start yielding rows
        until length is reached.

        Subsequent rows are never consumed, so the child
        generator is closed as soon as the page is complete,
        which releases any resource (like open files) it holds.
        """
        consumed_rows = 0  # keep track of how many rows we have already seen
        emitted_rows = 0
        empty_batch = None

        batches_generator = self.child.batches()
        try:
            for batch in batches_generator:
                if empty_batch is None:
                    empty_batch = batch.slice(0, 0)
                if emitted_rows >= self.length:
                    break

                batch_size = batch.num_rows

                # Keep discarding batches until we get to the batch that
                # has the rows _after_ offset.
                if consumed_rows + batch_size <= self.offset:
                    consumed_rows += batch_size
                    continue

                # The rows we care about might be further on inside the batch.
                start_in_batch = max(0, self.offset - consumed_rows)
                rows_in_this_batch = min(
                    batch_size - start_in_batch, self.length - emitted_rows
                )
                if rows_in_this_batch > 0:
                    yield batch.slice(start_in_batch, rows_in_this_batch)
                    emitted_rows += rows_in_this_batch
                consumed_rows += batch_size
                if emitted_rows >= self.length:
                    break
        finally:
            batches_generator.close()

        if emitted_rows == 0 and empty_batch is not None:
            yield empty_batch
