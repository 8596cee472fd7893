"""
CLI Commands for the loyalty history service.

Usage:
    flask history init-db           # Create the history tables
    flask history show <user_id>    # Print combined history
"""
from .history import init_app as init_history_commands


def init_app(app):
    """Register all CLI commands with the Flask app."""
    init_history_commands(app)
