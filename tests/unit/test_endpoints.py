from src.adapters.transit_api.endpoints import TransitApiEndpoints, api
from src.app.ports.output import RouteSearchFilter, StopSearchFilter


def test_operator_name_is_percent_encoded() -> None:
    assert api.operators.get_data("KMŁ") == "/api/v1/operators/KM%C5%81"
    assert api.operators.get_routes("a/b c") == "/api/v1/operators/a%2Fb%20c/routes"


def test_route_by_id_without_destination_has_no_query() -> None:
    assert api.routes.get_by_id(12) == "/api/v1/routes/12"
    assert api.routes.get_by_id(12, "") == "/api/v1/routes/12"


def test_route_by_id_with_destination() -> None:
    assert api.routes.get_by_id(12, "Nowy Sącz") == "/api/v1/routes/12?destination=Nowy+S%C4%85cz"


def test_route_search_omits_missing_params_and_formats_numbers() -> None:
    search = RouteSearchFilter(
        from_latitude=50.0,
        from_longitude=19.94,
        radius=500.0,
        max_transfers=2,
    )

    url = api.routes.get_all(search)

    assert url == "/api/v1/routes?fromLatitude=50&fromLongitude=19.94&radius=500&maxTransfers=2"


def test_empty_filters_never_emit_bare_question_mark() -> None:
    assert api.routes.get_all(RouteSearchFilter()) == "/api/v1/routes"
    assert api.stops.get_all(StopSearchFilter()) == "/api/v1/stops"
    assert api.stops.get_all() == "/api/v1/stops"


def test_stop_search() -> None:
    url = api.stops.get_all(StopSearchFilter(latitude=50.1, longitude=19.9, radius=250))

    assert url == "/api/v1/stops?latitude=50.1&longitude=19.9&radius=250"


def test_report_and_track_paths() -> None:
    assert api.routes.create_report(4) == "/api/v1/routes/4/reports"
    assert api.routes.get_tracks(4) == "/api/v1/routes/4/tracks"
    assert api.reports.delete(99) == "/api/v1/reports/99"
    assert api.stops.get_by_id(7) == "/api/v1/stops/7"


def test_custom_base() -> None:
    assert TransitApiEndpoints(base="").operators.get_all() == "/operators"
