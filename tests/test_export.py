import io
from datetime import datetime

import pandas as pd

from leads_dashboard.etl import export


def test_export_refuses_empty_input():
    result = export.export_csv([], "restaurants.csv")
    assert not result.ok
    assert result.content is None
    assert result.warning == export.EMPTY_WARNING


def test_empty_warning_can_be_worded_by_caller():
    result = export.export_csv([], "companies.csv", empty_warning=export.NO_DOWNLOAD_WARNING)

    assert result.warning == "No data to download"
    assert export.export_warning([]) == "No data to export!"


def test_export_refuses_more_than_row_limit():
    records = [{"name": str(i)} for i in range(10001)]

    assert export.export_warning(records) == export.TOO_LARGE_WARNING
    assert export.export_xlsx(records, "restaurants.xlsx").warning == export.TOO_LARGE_WARNING
    assert export.export_warning(records[:10000]) is None


def test_csv_header_comes_from_first_record():
    records = [{"name": "A", "phone": "1"}, {"phone": "2", "name": "B", "extra": "ignored"}, {"name": None}]
    text = export.to_csv_text(records)
    assert text == "name,phone\nA,1\nB,2\n,\n"


def test_csv_round_trip_preserves_commas_and_quotes():
    value = 'Joe\'s "Famous" Pizza, Brooklyn'
    records = [{"name": value, "address": "line one\nline two"}]

    text = export.to_csv_text(records)

    assert '"Joe\'s ""Famous"" Pizza, Brooklyn"' in text
    parsed = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    assert parsed.loc[0, "name"] == value
    assert parsed.loc[0, "address"] == "line one\nline two"


def test_csv_explicit_columns():
    result = export.export_csv([{"URL": "u", "Company Name": "c"}], "p.csv", columns=("Company Name", "URL", "Email"))
    assert result.ok
    assert result.mimetype == export.CSV_MIMETYPE
    assert result.content.decode("utf-8") == "Company Name,URL,Email\nc,u,\n"


def test_xlsx_export_produces_sheet():
    records = [{"name": "A", "rating": 4.5}, {"name": "B"}]
    result = export.export_xlsx(records, "restaurants.xlsx", sheet_name="Restaurants")

    assert result.ok
    frame = pd.read_excel(io.BytesIO(result.content), sheet_name="Restaurants", dtype=str, keep_default_na=False)
    assert list(frame.columns) == ["name", "rating"]
    assert frame["name"].tolist() == ["A", "B"]
    assert frame.loc[0, "rating"] == "4.5"


def test_filenames():
    now = datetime(2024, 3, 9, 12, 0, 0)
    assert export.timestamped_filename("restaurants", "csv", now) == f"restaurants_{int(now.timestamp() * 1000)}.csv"
    assert export.dated_filename("trustpilot_profiles_", "csv", now) == "trustpilot_profiles_2024-03-09.csv"
    assert export.location_slug("London, UK") == "London--UK"
