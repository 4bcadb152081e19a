"""Send a single Slack message via incoming webhook or the Web API."""

__version__ = "0.1.0"
