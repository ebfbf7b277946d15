import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from league_admin.config import resolve_build_hash, settings
from league_admin.database import init_db
from league_admin.errors import InvalidInput, PersistenceError
from league_admin.routes import (
    coaches,
    fields,
    matches,
    players,
    programs,
    public,
    scheduling,
    sessions,
    teams,
    tournaments,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

APP_NAME = "League Admin API"
BUILD_HASH = resolve_build_hash()

app = FastAPI(title=APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInput)
def invalid_input_handler(request: Request, exc: InvalidInput):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# Include routers
app.include_router(tournaments.router, prefix="/api", tags=["tournaments"])
app.include_router(fields.router, prefix="/api", tags=["fields"])
app.include_router(teams.router, prefix="/api", tags=["teams"])
app.include_router(matches.router, prefix="/api", tags=["matches"])
app.include_router(scheduling.router, prefix="/api", tags=["scheduling"])

# Public endpoints (no auth)
app.include_router(public.router, prefix="/api", tags=["public"])

app.include_router(players.router, prefix="/api", tags=["players"])
app.include_router(coaches.router, prefix="/api", tags=["coaches"])
app.include_router(programs.router, prefix="/api", tags=["coaching"])
app.include_router(sessions.router, prefix="/api", tags=["coaching"])


@app.on_event("startup")
def on_startup():
    init_db()

    route_count = 0
    for r in app.routes:
        path = getattr(r, "path", None)
        if path:
            methods = getattr(r, "methods", None)
            methods_str = ", ".join(sorted(methods)) if methods else "N/A"
            logger.debug("%-20s %s", methods_str, path)
            route_count += 1
    logger.info("%s started: %d routes, build %s", APP_NAME, route_count, BUILD_HASH)


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint to verify which code is running"""
    return {"appName": APP_NAME, "buildHash": BUILD_HASH, "status": "healthy"}
