"""HTTP entrypoint exposing the dashboard views as JSON endpoints."""

from __future__ import annotations

import io
import logging
from dataclasses import asdict
from typing import Any, Dict

from flask import Flask, jsonify, request, send_file

from leads_dashboard.core.config import MISSING_BASE_URL, get_settings
from leads_dashboard.core.locations import GROUPED_LOCATIONS, LOCATIONS, is_known_location, unknown_location_message
from leads_dashboard.core.pagination import MISSING_LOCATION, SearchState
from leads_dashboard.models import ExportResult
from leads_dashboard.views.companies import CompanySearchView
from leads_dashboard.views.profiles import NO_URLS_MESSAGE, ProfileView
from leads_dashboard.views.restaurants import RestaurantView

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & views ----------
app = Flask(__name__)
restaurants = RestaurantView()
companies = CompanySearchView()
profiles = ProfileView()

_VALIDATION_MESSAGES = {MISSING_BASE_URL, MISSING_LOCATION, NO_URLS_MESSAGE}


def reset_views() -> None:
    """Drop all in-memory view state (used on startup and by tests)."""
    global restaurants, companies, profiles
    restaurants = RestaurantView()
    companies = CompanySearchView()
    profiles = ProfileView()


# ---------- Routes ----------


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    return jsonify({"status": "ok", "api_configured": bool(settings.api_base_url)}), 200


@app.get("/api/restaurants")
def list_restaurants() -> Any:
    """
    Return restaurant rows, fetching when asked to refresh or nothing is loaded.
    Query params: limit (int), q (filter text), refresh (1 to force a fetch)
    """
    limit_raw = request.args.get("limit")
    if limit_raw is not None:
        try:
            limit = int(limit_raw)
        except ValueError:
            return jsonify({"error": "limit must be numeric"}), 400
        if limit <= 0:
            return jsonify({"error": "limit must be positive"}), 400
        restaurants.set_limit(limit)

    if request.args.get("refresh") == "1" or not restaurants.data:
        if not restaurants.fetch():
            if restaurants.error is None:
                return jsonify({"error": "fetch already in progress"}), 409
            return jsonify({"error": restaurants.error}), _error_status(restaurants.error)

    if "q" in request.args:
        restaurants.on_search_input(request.args["q"])
        restaurants.flush_search()

    return jsonify(
        {
            "data": restaurants.rows(),
            "count": len(restaurants.filtered),
            "total": len(restaurants.data),
            "limit": restaurants.limit,
            "warning": restaurants.warning,
        }
    ), 200


@app.get("/api/restaurants/export")
def export_restaurants() -> Any:
    fmt = request.args.get("format", "csv").lower()
    if fmt == "csv":
        return _send_export(restaurants.export_csv())
    if fmt == "xlsx":
        return _send_export(restaurants.export_xlsx())
    return jsonify({"error": "format must be csv or xlsx"}), 400


@app.get("/api/companies/locations")
def list_locations() -> Any:
    grouped = {country: list(cities) for country, cities in GROUPED_LOCATIONS.items()}
    return jsonify({"data": {"grouped": grouped, "locations": list(LOCATIONS)}}), 200


@app.post("/api/companies/search")
def search_companies() -> Any:
    """
    Start a new company search.
    Required JSON fields: location (one of /api/companies/locations)
    Optional: query (str), from_page (int), to_page (int)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    changes: Dict[str, Any] = {"location": str(payload.get("location") or "").strip()}
    if changes["location"] and not is_known_location(changes["location"]):
        return jsonify({"error": unknown_location_message(changes["location"])}), 400
    if payload.get("query") is not None:
        changes["query"] = str(payload["query"])
    companies.set_inputs(**changes)

    state = companies.submit()
    return _company_response(state)


@app.post("/api/companies/more")
def more_companies() -> Any:
    return _company_response(companies.load_more())


@app.get("/api/companies/export")
def export_companies() -> Any:
    return _send_export(companies.export_csv())


@app.post("/api/profiles/upload")
def upload_profiles() -> Any:
    upload = request.files.get("file")
    if upload is None:
        return jsonify({"error": "file is required"}), 400

    result = profiles.upload(upload.read(), filename=upload.filename)
    status = 400 if result.parse_failed else 200
    return jsonify({"message": result.message, "urls": result.urls, "count": len(result.urls)}), status


@app.post("/api/profiles/enrich")
def enrich_profiles() -> Any:
    if not profiles.enrich():
        if profiles.loading:
            return jsonify({"error": "enrichment already in progress"}), 409
        return jsonify({"error": profiles.message}), _error_status(profiles.message or "")
    return jsonify({"data": profiles.profiles, "total": profiles.total}), 200


@app.get("/api/profiles/export")
def export_profiles() -> Any:
    return _send_export(profiles.export_csv())


@app.post("/api/profiles/clear")
def clear_profiles() -> Any:
    profiles.clear()
    return jsonify({"status": "cleared"}), 200


# ---------- Internals ----------


def _error_status(message: str) -> int:
    return 400 if message in _VALIDATION_MESSAGES else 502


def _company_response(state: SearchState) -> Any:
    body = asdict(state)
    body["results"] = [asdict(row) for row in state.results]
    if state.error:
        return jsonify({"error": state.error, "data": body}), _error_status(state.error)
    return jsonify({"data": body}), 200


def _send_export(result: ExportResult) -> Any:
    if not result.ok:
        return jsonify({"error": result.warning}), 400
    return send_file(
        io.BytesIO(result.content),
        as_attachment=True,
        download_name=result.filename,
        mimetype=result.mimetype,
    )


def main() -> None:
    port = get_settings().dashboard_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
