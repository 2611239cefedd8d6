from app.economy.regen import RegenerationService

__all__ = ["RegenerationService"]
