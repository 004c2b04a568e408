from __future__ import annotations

from dataclasses import dataclass

from .api.connection import ApiConfig, ApiConnection
from .core.constants import DEFAULT_API_TIMEOUT_SECONDS, DEFAULT_GOOD_PERCENTAGE, DEFAULT_MINIMUM_PERCENTAGE
from .marking.session import MarkingSession, SessionRegistry
from .roster.http_repository import HttpRosterRepository
from .roster.repository import RosterRepository


@dataclass(frozen=True)
class Container:
    roster_repo: RosterRepository
    sessions: SessionRegistry

    good_percentage: int = DEFAULT_GOOD_PERCENTAGE
    minimum_percentage: int = DEFAULT_MINIMUM_PERCENTAGE


def build_container(
    *,
    api_config: dict,
    good_percentage: int = DEFAULT_GOOD_PERCENTAGE,
    minimum_percentage: int = DEFAULT_MINIMUM_PERCENTAGE,
) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        timeout=float(api_config.get("timeout", DEFAULT_API_TIMEOUT_SECONDS)),
        token=api_config.get("token") or None,
    )
    conn = ApiConnection.get_instance(config)
    roster_repo = HttpRosterRepository(conn)
    return build_container_for(
        roster_repo,
        good_percentage=good_percentage,
        minimum_percentage=minimum_percentage,
    )


def build_container_for(
    roster_repo: RosterRepository,
    *,
    good_percentage: int = DEFAULT_GOOD_PERCENTAGE,
    minimum_percentage: int = DEFAULT_MINIMUM_PERCENTAGE,
) -> Container:
    """Wire the engine around an already-built repository (tests, scripts)."""

    sessions = SessionRegistry(lambda: MarkingSession(roster_repo))
    return Container(
        roster_repo=roster_repo,
        sessions=sessions,
        good_percentage=int(good_percentage),
        minimum_percentage=int(minimum_percentage),
    )
