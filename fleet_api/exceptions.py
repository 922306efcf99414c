# fleet_api/exceptions.py
"""
Rejected-operation errors raised by the vehicle registry.
Each carries the HTTP status it maps to at the API boundary; the message is
returned to the caller verbatim as {"error": message}.
"""


class VehicleRegistryError(Exception):
    """Base class for every business-rule rejection."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidPlate(VehicleRegistryError):
    """License plate missing, empty, or longer than the limit."""


class InvalidStatus(VehicleRegistryError):
    """Status value outside Available / InUse / Maintenance."""


class DuplicatePlate(VehicleRegistryError):
    """License plate already used by another vehicle."""

    def __init__(self, message: str = "License plate already exists."):
        super().__init__(message)


class MaintenanceCapExceeded(VehicleRegistryError):
    """Operation would push the Maintenance count over the fleet cap."""

    def __init__(self, message: str = "Too many vehicles in maintenance."):
        super().__init__(message)


class IllegalTransition(VehicleRegistryError):
    """Maintenance vehicle moved to anything other than Available."""

    def __init__(self, message: str = "Maintenance vehicles can only move to Available."):
        super().__init__(message)


class DeleteBlocked(VehicleRegistryError):
    """Delete attempted while the vehicle is InUse or in Maintenance."""

    def __init__(self, message: str = "Cannot delete vehicle in use or maintenance."):
        super().__init__(message)


class VehicleNotFound(VehicleRegistryError):
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)
