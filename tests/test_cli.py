import argparse

from leads_dashboard.core import config
from leads_dashboard.jobs import cli

from conftest import DummyResponse


def test_build_parser_defaults():
    parser = cli.build_parser()
    args = parser.parse_args(["companies", "--location", "London, UK"])
    assert isinstance(parser, argparse.ArgumentParser)
    assert args.query == "software company"
    assert args.batches == 1

    args = parser.parse_args(["restaurants"])
    assert args.limit == 10
    assert args.fmt == "csv"


def test_restaurants_command_writes_filtered_csv(session, tmp_path):
    session.queue(
        DummyResponse(payload={"data": [{"name": "Joe's Pizza"}, {"name": "Katz's Delicatessen"}]})
    )

    code = cli.main(["--output-dir", str(tmp_path), "restaurants", "--limit", "2", "--filter", "katz"])

    assert code == 0
    [written] = list(tmp_path.glob("restaurants_*.csv"))
    assert written.read_text(encoding="utf-8") == "name\nKatz's Delicatessen\n"


def test_companies_command_loads_batches(session, tmp_path):
    session.queue(
        DummyResponse(payload={"success": True, "total": 4, "results": ["https://www.trustpilot.com/review/a.com"]}),
        DummyResponse(payload={"success": True, "total": 4, "results": ["https://www.trustpilot.com/review/b.com"]}),
    )

    code = cli.main(
        ["--output-dir", str(tmp_path), "companies", "--location", "Paris, France", "--batches", "2"]
    )

    assert code == 0
    assert len(session.calls) == 2
    [written] = list(tmp_path.glob("trustpilot-companies-Paris--France-*.csv"))
    assert written.read_text(encoding="utf-8").count("Active Page") == 2


def test_profiles_command_without_urls_fails(session, tmp_path):
    upload = tmp_path / "urls.csv"
    upload.write_text("name\nnothing here\n", encoding="utf-8")

    assert cli.main(["--output-dir", str(tmp_path), "profiles", str(upload)]) == 1
    assert session.calls == []


def test_profiles_command_enriches(session, tmp_path):
    upload = tmp_path / "urls.csv"
    upload.write_text("url\nhttps://www.trustpilot.com/review/foo.com\n", encoding="utf-8")
    session.queue(DummyResponse(payload={"total": 1, "results": [{"name": "Foo"}]}))

    assert cli.main(["--output-dir", str(tmp_path / "out"), "profiles", str(upload)]) == 0
    [written] = list((tmp_path / "out").glob("trustpilot_profiles_*.csv"))
    assert "Foo" in written.read_text(encoding="utf-8")


def test_missing_config_exits_2(session, tmp_path, monkeypatch):
    monkeypatch.setenv("SCRAPE_API_BASE_URL", "")
    config.get_settings.cache_clear()

    assert cli.main(["--output-dir", str(tmp_path), "restaurants"]) == 2
    assert session.calls == []
