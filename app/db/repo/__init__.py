from app.db.repo.regen_balances_repo import RegenBalancesRepo

__all__ = ["RegenBalancesRepo"]
