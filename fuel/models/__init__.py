# fuel/models/__init__.py
from .pump import PumpOwner, PumpStaff
from .card import FuelCard, FuelCardStatus
from .transaction import FuelTransaction, FuelTransactionStatus, FraudType
