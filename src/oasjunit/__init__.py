"""oas-junit: turn OpenAPI lint results into JUnit XML reports."""

__version__ = "0.1.0"
