"""
Typed exception hierarchy for the project health engine.

Every error has a typed class (catch by type, not message), a class-level
``code`` attribute (machine-readable, API-safe) and carries its context as
attributes so the structured log formatter can emit it field by field.

    ProjectKernelError (base)
    |
    +-- ProjectError
    |   +-- ProjectNotFoundError
    |   +-- ProjectDataUnavailableError
    |
    +-- ConfigurationError
        +-- InvalidConfigurationError

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Project         | PROJECT_NOT_FOUND           | Project ID doesn't resolve to a row
                | PROJECT_DATA_UNAVAILABLE    | Target record could not be read
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_CONFIGURATION       | Settings file has a bad value

The pure engines raise none of these.  Rule evaluators are total functions
over already-defaulted inputs; a failure inside one is a defect in the
loader contract and propagates unchanged.

Handling pattern::

    try:
        targets = loader.load_targets(project_id)
    except ProjectNotFoundError as e:
        return not_found_response(project_id=e.project_id)
"""


class ProjectKernelError(Exception):
    """
    Base exception for all project health errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PROJECT_KERNEL_ERROR"


# Project data exceptions


class ProjectError(ProjectKernelError):
    """Base exception for project lookup errors."""

    code: str = "PROJECT_ERROR"


class ProjectNotFoundError(ProjectError):
    """Project with given ID was not found."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class ProjectDataUnavailableError(ProjectError):
    """The data store could not be read for this project."""

    code: str = "PROJECT_DATA_UNAVAILABLE"

    def __init__(self, project_id: str, source: str, detail: str = ""):
        self.project_id = project_id
        self.source = source
        self.detail = detail
        message = f"Project data unavailable: {project_id} ({source})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


# Configuration exceptions


class ConfigurationError(ProjectKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class InvalidConfigurationError(ConfigurationError):
    """A configuration value is missing or malformed."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration for '{key}': {reason}")
