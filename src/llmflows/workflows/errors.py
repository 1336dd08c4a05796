from __future__ import annotations


class WorkflowError(Exception):
    """Base exception for workflow failures."""


class RouteNotFoundError(WorkflowError):
    """The model selected a route that is not registered."""

    def __init__(self, selection: str, routes: list[str]) -> None:
        super().__init__(f"Selected route {selection!r} is not one of {routes}")
        self.selection = selection
        self.routes = routes
