"""
HTTP API blueprints for the loyalty history service.
"""
