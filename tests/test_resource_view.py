from kubedeck.ui.resource_view import count_by, filter_frame, rows_to_frame


ROWS = [
    {"name": "web-1", "phase": "Running", "labels": {"app": "web"}},
    {"name": "web-2", "phase": "Pending", "labels": {}},
    {"name": "db-0", "phase": "Running", "labels": {"app": "db"}},
    {"name": "job-x", "phase": None, "labels": {}},
]


def test_rows_to_frame_stringifies_nested_cells():
    df = rows_to_frame(ROWS)
    assert list(df.columns) == ["name", "phase", "labels"]
    assert df.loc[0, "labels"] == '{"app": "web"}'


def test_filter_frame_searches_every_column():
    df = rows_to_frame(ROWS)
    assert list(filter_frame(df, "PENDING")["name"]) == ["web-2"]
    assert list(filter_frame(df, '"db"')["name"]) == ["db-0"]
    assert len(filter_frame(df, "")) == len(ROWS)


def test_count_by_buckets_missing_values():
    assert count_by(ROWS, "phase") == {"Running": 2, "Pending": 1, "Unknown": 1}
