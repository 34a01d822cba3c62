# fleet/models/__init__.py
from .transporter import Transporter, CompanyUser, CompanyPermission
from .driver import Driver, DriverStatus
from .vehicle import Vehicle, VehicleStatus, OwnerType
