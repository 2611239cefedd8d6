from app.db.models.regen_balances import RegenBalance

__all__ = ["RegenBalance"]
