"""
Taksonomia bledow suite.

TransientUIError      — element jeszcze nie gotowy, naprawiane lokalnie (retry / wait)
WaitTimeoutError      — przekroczony limit naszego czekania
FieldNotFoundError    — wymagane pole nie pojawilo sie wcale (zmiana struktury strony)
InvalidOptionError    — brak opcji w select (kraj / region)

Dwa ostatnie NIGDY nie sa ponawiane — retry nie naprawi zmiany struktury.
Bledy Playwright (TimeoutError / Error) przechodza dalej bez opakowywania.
"""


class StorefrontError(Exception):
    pass


class TransientUIError(StorefrontError):
    pass


class WaitTimeoutError(StorefrontError, TimeoutError):
    def __init__(self, what: str, timeout_ms: int):
        self.what = what
        self.timeout_ms = timeout_ms
        super().__init__(f"{what} — przekroczono {timeout_ms} ms")


class FieldNotFoundError(StorefrontError):
    def __init__(self, field: str, detail: str = ""):
        self.field = field
        message = f"Pole '{field}' nie stalo sie dostepne"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidOptionError(StorefrontError):
    def __init__(self, field: str, wanted: str, available: list[str] | None = None):
        self.field = field
        self.wanted = wanted
        self.available = available or []
        preview = ", ".join(self.available[:10])
        super().__init__(f"Brak opcji '{wanted}' w polu '{field}' (dostepne: {preview})")
