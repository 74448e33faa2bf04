from worklog_app.core.column_config import get_columns, load_column_sets


def test_column_sets_load():
    sets = load_column_sets(reload=True)
    assert "worklog" in sets and "daily" in sets
    assert get_columns("worklog")[0] == "Ticket"
    assert get_columns("missing") == []


def test_yaml_overrides_sets(tmp_path):
    (tmp_path / "columns.yaml").write_text("sets:\n  worklog: [Ticket, duration]\n  daily: []\n")
    try:
        sets = load_column_sets(tmp_path, reload=True)
        assert sets["worklog"] == ["Ticket", "duration"]
        assert sets["daily"][0] == "day"
    finally:
        load_column_sets(reload=True)
