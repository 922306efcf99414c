# Fleet Vehicle Registry: Database Models
# Import all models here for SQLAlchemy discovery

from fleet_api.models.vehicle import Vehicle  # noqa
