class RegenError(Exception):
    pass


class RegenConfigError(RegenError):
    pass


class RegenConflictError(RegenError):
    pass


class RegenBalanceNotFoundError(RegenError):
    pass


class RegenContentionError(RegenError):
    def __init__(self, *, fid: int, attempts: int) -> None:
        super().__init__(f"regen commit for fid={fid} lost {attempts} compare-and-swap attempts")
        self.fid = fid
        self.attempts = attempts
