"""Console client for a personal task list: session handling and task sync against a todo API."""

__version__ = "0.1.0"
