"""Incident lookup exposed to the chat model as a callable tool."""

import logging
from typing import Any

from pydantic import ValidationError

from crimecast.schemas.incident import IncidentQuery, IncidentSummary
from crimecast.services.incident_store import IncidentStore

logger = logging.getLogger(__name__)

TOOL_NAME = "getCrimeData"

# Gemini function declaration (OpenAPI subset)
GET_CRIME_DATA_DECLARATION: dict[str, Any] = {
    "name": TOOL_NAME,
    "description": (
        "Retrieves a list of crime incidents based on the provided filters. Use this to "
        "answer questions about crime statistics, trends, and specific incidents. Infer "
        "the date range and filters from the user's natural language query."
    ),
    "parameters": {
        "type": "OBJECT",
        "properties": {
            "crimeType": {
                "type": "STRING",
                "description": (
                    'The type of crime to filter by (e.g., "Theft", "Accident"). Omit for all crimes.'
                ),
            },
            "policeStation": {
                "type": "STRING",
                "description": (
                    'The police station to filter by (e.g., "Connaught Place"). Omit for all stations.'
                ),
            },
            "startDate": {
                "type": "STRING",
                "description": "Start of the range, YYYY-MM-DD (inclusive).",
            },
            "endDate": {
                "type": "STRING",
                "description": "End of the range, YYYY-MM-DD (inclusive).",
            },
        },
    },
}


def query_incidents(store: IncidentStore, query: IncidentQuery) -> list[IncidentSummary]:
    """Incidents matching every supplied filter, without coordinates."""
    records = store.query(
        crime_type=query.crime_type,
        police_station=query.police_station,
        start_date=query.start_date,
        end_date=query.end_date,
    )
    return [
        IncidentSummary(
            id=r.id,
            crime_type=r.crime_type,
            occurred_at=r.occurred_at,
            police_station=r.police_station,
        )
        for r in records
    ]


def run_tool_call(store: IncidentStore, args: dict[str, Any] | None) -> dict[str, Any]:
    """
    Execute a ``getCrimeData`` call issued by the model.

    Returns the function response payload. Invalid arguments are reported back
    to the model instead of raising, so it can retry with corrected filters.
    """
    try:
        query = IncidentQuery.model_validate(args or {})
    except ValidationError as e:
        logger.warning(f"Invalid {TOOL_NAME} arguments {args!r}: {e}")
        return {"error": f"Invalid arguments: {e.errors(include_url=False)}"}

    incidents = query_incidents(store, query)
    logger.info(f"{TOOL_NAME} returned {len(incidents)} incidents for {args!r}")
    return {
        "count": len(incidents),
        "incidents": [i.model_dump(mode="json", by_alias=True) for i in incidents],
    }
