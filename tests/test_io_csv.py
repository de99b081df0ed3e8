from pathlib import Path

from dork_harvester.io_csv import CSV_FIELDS, build_rows, write_rows


def test_build_rows_sorts_and_splits_domain() -> None:
    rows = build_rows({"b@initech.net", "a@acme.io"}, "site:acme.io")
    assert [row["email"] for row in rows] == ["a@acme.io", "b@initech.net"]
    assert rows[0]["domain"] == "acme.io"
    assert rows[0]["query"] == "site:acme.io"
    assert rows[0]["date_exported_utc"].endswith("Z")


def test_write_rows_creates_csv_with_schema(tmp_path: Path) -> None:
    output = tmp_path / "out.csv"
    write_rows(
        str(output),
        [
            {
                "email": "a@acme.io",
                "domain": "acme.io",
                "query": "site:acme.io",
                "date_exported_utc": "2026-01-01T00:00:00Z",
            }
        ],
    )
    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(CSV_FIELDS)
    assert lines[1] == "a@acme.io,acme.io,site:acme.io,2026-01-01T00:00:00Z"
