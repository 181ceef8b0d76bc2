"""Tests for file reading/writing, batch orchestration and the CLI."""

import json
from decimal import Decimal

import pytest

from conftest import make_column
from csvmapper.cli import main
from csvmapper.config_models import ProcessorConfig
from csvmapper.errors import CsvParseException
from csvmapper.file_io import CsvFileWriter, read_file
from csvmapper.orchestrator import FileProcessingError, process_files
from csvmapper.processor import RowProcessor


@pytest.fixture
def config_processor(sample_csv_config) -> RowProcessor:
    return RowProcessor.from_config(ProcessorConfig.from_json_file(sample_csv_config))


def test_read_file(sample_csv_file, config_processor):
    results = list(read_file(sample_csv_file, config_processor))
    assert [r.row["order_id"] for r in results] == ["ORD001", "ORD002", "ORD003"]
    assert results[0].row["price"] == Decimal("10.50")
    assert results[1].row["paid"] is False
    assert results[1].row["note"] == "multi\nline note"
    assert results[2].row["note"] == 'says "hi"'
    assert results[2].line_number == 5


def test_read_file_crlf(tmp_path, config_processor):
    csv_file = tmp_path / "crlf.csv"
    csv_file.write_bytes(b'order_id,quantity,price,paid,note\r\nA,1,1,y,"x\r\ny"\r\n')
    results = list(read_file(csv_file, config_processor))
    assert results[0].row["note"] == "x\ny"


def test_write_then_read(tmp_path):
    processor = RowProcessor([make_column("name"), make_column("score", "float"), make_column("ok", "boolean")])
    rows = [
        {"name": "a,b", "score": 1.5, "ok": True},
        {"name": "line\nbreak", "score": None, "ok": False},
        {"name": 'q"uote', "score": -2.0, "ok": None},
    ]
    out_file = tmp_path / "out" / "scores.csv"
    with CsvFileWriter(out_file, processor, flush_every=1) as writer:
        for row in rows:
            writer.write_row(row)
    assert writer.row_count == 3
    assert out_file.read_text().splitlines()[0] == "name,score,ok"

    assert [r.row for r in read_file(out_file, processor)] == rows


def test_single_column_nulls_survive(tmp_path):
    processor = RowProcessor([make_column("note")])
    rows = [{"note": "a"}, {"note": None}, {"note": "b"}]
    out_file = tmp_path / "notes.csv"
    with CsvFileWriter(out_file, processor) as writer:
        for row in rows:
            writer.write_row(row)
    assert out_file.read_text() == 'note\na\n""\nb\n'
    assert [r.row for r in read_file(out_file, processor)] == rows


def test_writer_closed(tmp_path):
    processor = RowProcessor([make_column("name")])
    writer = CsvFileWriter(tmp_path / "x.csv", processor)
    writer.close()
    assert (tmp_path / "x.csv").read_text() == "name\n"
    with pytest.raises(RuntimeError):
        writer.write_row({"name": "a"})


def test_read_file_raises(bad_csv_file, config_processor):
    config_processor.continue_on_error = False
    with pytest.raises(CsvParseException) as exc_info:
        list(read_file(bad_csv_file, config_processor))
    assert exc_info.value.line_number == 3


class TestProcessFiles:
    """Test batch processing."""

    def test_process_files(self, sample_csv_config, sample_csv_file, bad_csv_file, tmp_path):
        out_dir = tmp_path / "clean"
        file_stats, row_errors, file_errors = process_files(
            sample_csv_config, [sample_csv_file, bad_csv_file], out_dir
        )
        assert file_errors == {}
        assert file_stats[str(sample_csv_file)].success_rows == 3
        bad_stats = file_stats[str(bad_csv_file)]
        assert bad_stats.success_rows == 2
        assert bad_stats.failed_rows == 2
        assert len(row_errors[str(bad_csv_file)]) == 2
        assert "quantity" in row_errors[str(bad_csv_file)][0]

        clean = (out_dir / bad_csv_file.name).read_text().splitlines()
        assert clean == [
            "order_id,quantity,price,paid,note",
            "ORD001,2,10.50,Y,ok",
            "ORD004,1,1.00,N,ok",
        ]

    def test_missing_input(self, sample_csv_config, sample_csv_file, tmp_path):
        missing = tmp_path / "missing.csv"
        file_stats, row_errors, file_errors = process_files(sample_csv_config, [missing, sample_csv_file])
        assert str(missing) in file_errors
        assert str(sample_csv_file) in file_stats

    def test_unreadable_input_gets_own_stats(self, sample_csv_config, sample_csv_file, tmp_path):
        unreadable = tmp_path / "folder.csv"
        unreadable.mkdir()
        file_stats, row_errors, file_errors = process_files(sample_csv_config, [sample_csv_file, unreadable])
        assert str(unreadable) in file_errors
        assert file_stats[str(sample_csv_file)].success_rows == 3
        assert file_stats[str(unreadable)].total_rows == 0
        assert file_stats[str(unreadable)].success_rows == 0

    def test_fail_fast(self, sample_csv_config, tmp_path):
        with pytest.raises(FileProcessingError):
            process_files(sample_csv_config, [tmp_path / "missing.csv"], fail_fast=True)

    def test_row_failure_fails_file(self, tmp_path, bad_csv_file):
        config_file = tmp_path / "strict.json"
        config_file.write_text(json.dumps({"columns": [
            {"name": "order_id"}, {"name": "quantity", "type": "int"}, {"name": "price", "type": "decimal"},
            {"name": "paid"}, {"name": "note"}
        ]}))
        file_stats, row_errors, file_errors = process_files(config_file, [bad_csv_file])
        assert "CsvParseException" in file_errors[str(bad_csv_file)]


class TestCli:
    """Test CLI exit codes."""

    def test_success(self, sample_csv_config, sample_csv_file, tmp_path):
        assert main(["--config", str(sample_csv_config), "--out", str(tmp_path / "o"), str(sample_csv_file)]) == 0
        assert (tmp_path / "o" / sample_csv_file.name).exists()

    def test_partial_failure(self, sample_csv_config, sample_csv_file, tmp_path):
        assert main(["--config", str(sample_csv_config), str(sample_csv_file), str(tmp_path / "nope.csv")]) == 2

    def test_all_failed(self, sample_csv_config, tmp_path):
        assert main(["--config", str(sample_csv_config), str(tmp_path / "nope.csv")]) == 1

    def test_missing_config(self, sample_csv_file, tmp_path):
        assert main(["--config", str(tmp_path / "none.json"), str(sample_csv_file)]) == 1

    def test_bad_column_format(self, sample_csv_file, tmp_path):
        config_file = tmp_path / "bad.json"
        config_file.write_text(json.dumps({"columns": [{"name": "paid", "type": "boolean", "format": "Y"}]}))
        assert main(["--config", str(config_file), str(sample_csv_file)]) == 1
