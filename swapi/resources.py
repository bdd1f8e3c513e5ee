from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Resource:
    """One SWAPI collection and the pair of MCP tools exposed for it."""

    path: str
    list_tool: str
    detail_tool: str
    noun: str
    noun_singular: str

    def detail_path(self, resource_id: int | str) -> str:
        return f"{self.path}{str(resource_id).strip('/')}/"

    @property
    def list_description(self) -> str:
        return f"List Star Wars {self.noun} with automatic pagination and optional search"

    @property
    def detail_description(self) -> str:
        return f"Get details about a specific Star Wars {self.noun_singular} by ID"


RESOURCES: Tuple[Resource, ...] = (
    Resource("/people/", "get_people", "get_person_by_id", "characters", "character"),
    Resource("/planets/", "get_planets", "get_planet_by_id", "planets", "planet"),
    Resource("/films/", "get_films", "get_film_by_id", "films", "film"),
    Resource("/species/", "get_species_list", "get_species_by_id", "species", "species"),
    Resource("/vehicles/", "get_vehicles", "get_vehicle_by_id", "vehicles", "vehicle"),
    Resource("/starships/", "get_starships", "get_starship_by_id", "starships", "starship"),
)

RESOURCES_BY_PATH: Dict[str, Resource] = {r.path: r for r in RESOURCES}
