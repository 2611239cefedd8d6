from app.economy.regen.service import RegenerationService
from app.economy.regen.store import BalanceStore, SqlBalanceStore
from app.economy.regen.types import RegenConfig

__all__ = [
    "BalanceStore",
    "RegenConfig",
    "RegenerationService",
    "SqlBalanceStore",
]
