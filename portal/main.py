import logging

from fastapi import FastAPI

from portal.api.errors import register_error_handlers
from portal.api.v1.assistance import router as assistance_router
from portal.api.v1.auth import router as auth_router
from portal.api.v1.bookings import router as bookings_router
from portal.api.v1.extensions import router as extensions_router
from portal.api.v1.profile import router as profile_router
from portal.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "customer_id", "session_id", "step", "status", "path", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title=f"{settings.BUSINESS_NAME} Customer Portal", version="1.0.0")

register_error_handlers(app)

app.include_router(auth_router, prefix="/api/v1", tags=["auth"])
app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])
app.include_router(extensions_router, prefix="/api/v1", tags=["extensions"])
app.include_router(profile_router, prefix="/api/v1", tags=["profile"])
app.include_router(assistance_router, prefix="/api/v1", tags=["assistance"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
