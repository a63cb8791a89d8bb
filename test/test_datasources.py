import os
import tempfile

import pyarrow as pa
import pyarrow.csv as csv
import pytest

from tidyground.compute.datasources import CSVDataSource, PyArrowTableDataSource

# Mock data for testing
MOCK_PYARROW_TABLE = pa.table({"col1": [1, 4, 7], "col2": [2, 5, 8], "col3": [3, 6, 9]})

MOCK_CSV_FILE = tempfile.NamedTemporaryFile(delete=False, mode="w+")
MOCK_CSV_WITH_MISSING_FILE = tempfile.NamedTemporaryFile(
    delete=False, mode="w+", suffix=".csv"
)


def setup_module():
    csv.write_csv(MOCK_PYARROW_TABLE, MOCK_CSV_FILE.name)
    MOCK_CSV_FILE.close()
    MOCK_CSV_WITH_MISSING_FILE.write("species_id,sex,weight\nDM,F,42\nDO,,\nPE,M,NA\n")
    MOCK_CSV_WITH_MISSING_FILE.close()


def teardown_module():
    os.unlink(MOCK_CSV_FILE.name)
    os.unlink(MOCK_CSV_WITH_MISSING_FILE.name)


@pytest.mark.parametrize(
    "data_source_class, init_args, expected_str",
    [
        (
            CSVDataSource,
            (MOCK_CSV_FILE.name, None),
            f"CSVDataSource({MOCK_CSV_FILE.name}, block_size=None)",
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE,),
            "PyArrowTableDataSource(columns=['col1', 'col2', 'col3'], rows=3)",
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE.to_batches()[0],),
            "PyArrowTableDataSource(columns=['col1', 'col2', 'col3'], rows=3)",
        ),
    ],
)
def test_init_and_str(data_source_class, init_args, expected_str):
    data_source = data_source_class(*init_args)
    assert str(data_source) == expected_str


@pytest.mark.parametrize(
    "data_source_class, init_args, expected_batches",
    [
        (CSVDataSource, (MOCK_CSV_FILE.name, None), MOCK_PYARROW_TABLE.to_batches()),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE,),
            MOCK_PYARROW_TABLE.to_batches(),
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE.to_batches()[0],),
            MOCK_PYARROW_TABLE.to_batches(),
        ),
    ],
)
def test_batches(data_source_class, init_args, expected_batches):
    data_source = data_source_class(*init_args)
    batches = list(data_source.batches())
    assert len(batches) == len(expected_batches)
    for batch, expected_batch in zip(batches, expected_batches):
        assert batch.equals(expected_batch)


@pytest.mark.parametrize(
    "data_source_class, init_args",
    [
        (CSVDataSource, (MOCK_CSV_FILE.name,)),
        (PyArrowTableDataSource, (MOCK_PYARROW_TABLE,)),
    ],
)
def test_poll_schema(data_source_class, init_args):
    data_source = data_source_class(*init_args)
    assert data_source.poll_schema() == MOCK_PYARROW_TABLE.schema


def test_csv_missing_values():
    data = pa.Table.from_batches(
        CSVDataSource(MOCK_CSV_WITH_MISSING_FILE.name).batches()
    )
    assert data.to_pydict() == {
        "species_id": ["DM", "DO", "PE"],
        "sex": ["F", None, "M"],
        "weight": [42, None, None],
    }
    assert data.schema.field("weight").type == pa.int64()


def test_csv_missing_file():
    with pytest.raises(FileNotFoundError):
        list(CSVDataSource("/nonexistent/surveys.csv").batches())


def test_csv_with_only_the_header(tmp_path):
    path = tmp_path / "surveys.csv"
    path.write_text("species_id,sex,weight\n")
    batches = list(CSVDataSource(str(path)).batches())
    assert len(batches) == 1
    assert batches[0].num_rows == 0
    assert batches[0].schema.names == ["species_id", "sex", "weight"]


def test_empty_table_keeps_columns():
    table = pa.Table.from_batches([], schema=MOCK_PYARROW_TABLE.schema)
    batches = list(PyArrowTableDataSource(table).batches())
    assert len(batches) == 1
    assert batches[0].num_rows == 0
    assert batches[0].schema == MOCK_PYARROW_TABLE.schema
