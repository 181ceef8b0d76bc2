"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path

import pytest

from csvmapper.converters import get_converter
from csvmapper.errors import ParseError
from csvmapper.models import ColumnInfo
from csvmapper.processor import RowProcessor
from csvmapper.tokenizer import LineTokenizer


def make_column(name: str, type_name: str = "string", format=None, flags: int = 0, **kwargs) -> ColumnInfo:
    """Build a ColumnInfo for a registered converter type."""
    return ColumnInfo(column_name=name, converter=get_converter(type_name), format=format, flags=flags, **kwargs)


@pytest.fixture
def parse_error() -> ParseError:
    return ParseError()


@pytest.fixture
def tokenizer() -> LineTokenizer:
    return LineTokenizer()


@pytest.fixture
def order_columns():
    """Columns of the sample order file."""
    return [
        make_column("order_id", "string", required=True),
        make_column("quantity", "int"),
        make_column("price", "decimal"),
        make_column("paid", "boolean"),
        make_column("note", "string"),
    ]


@pytest.fixture
def order_processor(order_columns) -> RowProcessor:
    return RowProcessor(order_columns)


@pytest.fixture
def sample_csv_config(tmp_path) -> Path:
    """Create a sample column configuration."""
    config = {
        "delimiter": ",",
        "first_line_header": True,
        "continue_on_error": True,
        "columns": [
            {"name": "order_id", "type": "string", "required": True},
            {"name": "quantity", "type": "int"},
            {"name": "price", "type": "decimal"},
            {"name": "paid", "type": "boolean", "format": "Y,N", "converter_flags": 2},
            {"name": "note", "type": "string"}
        ]
    }
    config_file = tmp_path / "columns.json"
    config_file.write_text(json.dumps(config, indent=2))
    return config_file


@pytest.fixture
def sample_csv_file(tmp_path) -> Path:
    """Create a sample CSV file for testing."""
    csv_content = (
        'order_id,quantity,price,paid,note\n'
        'ORD001,2,10.50,Y,first order\n'
        'ORD002,1,99.99,N,"multi\nline note"\n'
        'ORD003,5,7.25,Y,"says ""hi"""\n'
    )
    csv_file = tmp_path / "orders.csv"
    csv_file.write_text(csv_content)
    return csv_file


@pytest.fixture
def bad_csv_file(tmp_path) -> Path:
    """Create a CSV file with one bad row."""
    csv_content = (
        'order_id,quantity,price,paid,note\n'
        'ORD001,2,10.50,Y,ok\n'
        'ORD002,two,99.99,N,bad quantity\n'
        'ORD003,5,7.25,maybe,bad flag\n'
        'ORD004,1,1.00,N,ok\n'
    )
    csv_file = tmp_path / "bad_orders.csv"
    csv_file.write_text(csv_content)
    return csv_file
