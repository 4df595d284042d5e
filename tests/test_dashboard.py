"""Tests for the dashboard entry point."""

from datetime import datetime
from unittest.mock import patch

import dashboard
from counts import AggregationType

SERVICES = {6: {"id": 6, "name": "Sound"}, 69: {"id": 69, "name": "Video"}}

EVENTS = [
    {"name": "Gottesdienst", "startDate": "2024-01-07T10:00:00Z", "endDate": "2024-01-07T11:00:00Z",
     "eventServices": [{"serviceId": 6, "name": "Alice"}, {"serviceId": 69, "name": "Alice"},
                       {"serviceId": 69, "name": "Bob"}]},
    {"name": "Gottesdienst", "startDate": "2024-01-14T10:00:00Z", "endDate": "2024-01-14T11:00:00Z",
     "eventServices": [{"serviceId": 6, "name": "Alice"}]},
]

OPTIONS = {
    "calendars": [2],
    "services": [6, 69],
    "from_date": datetime(2024, 1, 1),
    "to_date": datetime(2024, 6, 30),
    "min_services_count": 2,
    "aggregation_type": AggregationType.EVENT,
}


def test_build_dashboard_data():
    by_service, by_date, events_html = dashboard.build_dashboard_data(EVENTS, SERVICES, OPTIONS)
    assert by_service == [
        {"person": "Alice", "serviceName": "Sound", "count": 1.5},
        {"person": "Alice", "serviceName": "Video", "count": 0.5},
    ]
    assert by_date == [
        {"person": "Alice", "count": 1, "date": "2024-01-07"},
        {"person": "Alice", "count": 1, "date": "2024-01-14"},
    ]
    assert "Video Bob" in events_html


def test_main_without_base_url(capsys):
    with patch.object(dashboard, "CHURCHTOOLS_BASE_URL", ""):
        with patch("dashboard.fetch_events") as fetch:
            dashboard.main()
    fetch.assert_not_called()
    assert "CHURCHTOOLS_BASE_URL not set" in capsys.readouterr().out


def test_main_creates_and_opens_dashboard(capsys):
    with patch.object(dashboard, "CHURCHTOOLS_BASE_URL", "https://example.church.tools"), \
            patch("dashboard.fetch_calendars", return_value=[{"id": 2, "name": "Gottesdienste"}]), \
            patch("dashboard.print_available_calendars"), \
            patch("dashboard.print_available_services") as print_services, \
            patch("dashboard.get_user_filter_options", return_value=OPTIONS), \
            patch("dashboard.fetch_events", return_value=EVENTS), \
            patch("dashboard.fetch_services_dict", return_value=SERVICES) as fetch_services, \
            patch("dashboard.create_dashboard", return_value="outputs/serving_dashboard.html") as create, \
            patch("dashboard.webbrowser.open") as browser:
        dashboard.main()

    by_service, by_date, events_html, options = create.call_args[0]
    assert {d["person"] for d in by_service} == {"Alice"}
    assert options is OPTIONS
    fetch_services.assert_called_once()
    print_services.assert_called_once_with(SERVICES)
    browser.assert_called_once()
    out = capsys.readouterr().out
    assert "SERVING DASHBOARD CREATED" in out
    assert "Unknown calendar ids" not in out


def test_main_reports_errors(capsys):
    with patch.object(dashboard, "CHURCHTOOLS_BASE_URL", "https://example.church.tools"), \
            patch("dashboard.fetch_calendars", side_effect=RuntimeError("boom")):
        dashboard.main()
    assert "❌ Error: boom" in capsys.readouterr().out


def test_main_warns_about_unknown_calendars(capsys):
    options = dict(OPTIONS, calendars=[2, 7])
    with patch.object(dashboard, "CHURCHTOOLS_BASE_URL", "https://example.church.tools"), \
            patch("dashboard.fetch_calendars", return_value=[{"id": 2, "name": "Gottesdienste"}]), \
            patch("dashboard.fetch_services_dict", return_value=SERVICES), \
            patch("dashboard.print_available_calendars"), \
            patch("dashboard.print_available_services"), \
            patch("dashboard.get_user_filter_options", return_value=options), \
            patch("dashboard.fetch_events", return_value=[]), \
            patch("dashboard.create_dashboard", return_value=None):
        dashboard.main()
    out = capsys.readouterr().out
    assert "Unknown calendar ids, no events will match them: [7]" in out
    assert "Failed to create dashboard" in out
