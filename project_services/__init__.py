"""
project_services -- orchestration over the pure health engines.

``ProjectHealthService`` sequences loader, rules, status, next action and
economy for one project.  ``ProjectDataLoader`` is the only component that
touches the database.
"""

from project_services.project_data_loader import ProjectDataLoader, ProjectDataSource
from project_services.project_health_service import (
    HealthLookup,
    HealthLookupStatus,
    ProjectHealthService,
    not_found_health,
)

__all__ = [
    "HealthLookup",
    "HealthLookupStatus",
    "ProjectDataLoader",
    "ProjectDataSource",
    "ProjectHealthService",
    "not_found_health",
]
