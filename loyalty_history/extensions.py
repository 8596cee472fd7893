"""
Flask extensions initialization.
"""
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# Database (schema models + pooled engine)
db = SQLAlchemy()

# Migrations
migrate = Migrate()
