import json

from rich.console import Console

from locapp.cli import EXIT_OK, EXIT_TOO_MANY, EXIT_USAGE, main


def _console() -> Console:
    return Console(record=True, width=120, color_system=None)


def test_expand_renders_tree():
    console = _console()
    assert main(["expand", "20{2}*(+-[2])"], console) == EXIT_OK
    output = console.export_text()
    assert "20{2}*(+-[2]) (6 locations)" in output
    assert "201-A" in output
    assert "202-B" in output


def test_expand_json_lists_preview_names():
    console = _console()
    assert main(["expand", "A{12}", "--json", "--limit", "2"], console) == EXIT_OK
    payload = json.loads(console.export_text())
    assert payload["total"] == 12
    assert payload["names"] == ["A01", "A02"]
    assert payload["truncated"] is True


def test_expand_refuses_large_patterns():
    console = _console()
    assert main(["--max-names", "5", "expand", "A{10}"], console) == EXIT_TOO_MANY
    assert "expands to 10 locations (limit 5)" in console.export_text()


def test_basic_generates_advanced_text():
    console = _console()
    assert main(["basic", "A", "B:3", "C:1:2", "D:2:2"], console) == EXIT_OK
    lines = console.export_text().strip().splitlines()
    assert lines[0] == "A, B{3}, C[2], D{2}-[2]"
    assert lines[1] == "10 aisle locations: A1A, B1A, B2A, B3A, C1A, C1B, D1A, D1B, D2A, D2B"


def test_basic_json_truncates_names():
    console = _console()
    assert main(["basic", "PRT:10:5", "--json", "--limit", "3"], console) == EXIT_OK
    assert json.loads(console.export_text()) == {
        "text": "PRT{10}-[5]",
        "names": ["PRT01A", "PRT01B", "PRT01C"],
        "total": 50,
    }


def test_non_numeric_max_names_env_is_usage_error(monkeypatch, capsys):
    monkeypatch.setenv("LOCATION_PATTERN_MAX_NAMES", "lots")
    assert main(["expand", "A"], _console()) == EXIT_USAGE
    assert "--max-names" in capsys.readouterr().err


def test_basic_rejects_bad_config(capsys):
    assert main(["basic", ":3"], _console()) == EXIT_USAGE
    assert "NAME[:COLUMNS[:ROWS]]" in capsys.readouterr().err


def test_aisles_json():
    console = _console()
    assert main(["aisles", "PRT{2}-[3], X{5}", "--json"], console) == EXIT_OK
    assert json.loads(console.export_text()) == [
        {"name": "PRT", "columns": 2, "rows": 3},
        {"name": "X", "columns": 5, "rows": 1},
    ]


def test_aisles_table():
    console = _console()
    assert main(["aisles", "Y[2]"], console) == EXIT_OK
    output = console.export_text()
    assert "Aisle configs" in output
    assert "Y" in output


def test_plan_table_lists_types():
    console = _console()
    assert main(["plan", "20{2}*(+-[2])", "--parent-type", "ZONE"], console) == EXIT_OK
    output = console.export_text()
    assert "Creation plan (6 locations)" in output
    assert "Aisle" in output
    assert "Shelf" in output


def test_plan_json():
    console = _console()
    assert main(["plan", "A(B)", "--json"], console) == EXIT_OK
    payload = json.loads(console.export_text())
    assert payload["total"] == 2
    assert payload["children"][0]["parent_name"] == "A"
    assert payload["children"][0]["type"] == "ZONE"
