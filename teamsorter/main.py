from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from loguru import logger
from sqlalchemy.orm import Session
from starlette import status

from teamsorter.core.db import close_db, get_db, init_db
from teamsorter.core.errors import InvalidInput, StorageError, TeamSorterError, UnknownTeam
from teamsorter.core.logging_setup import setup_logger
from teamsorter.core.settings import config_settings
from teamsorter.core.teams import TeamRoster, get_team_roster
from teamsorter.models.schemas.assignment import (
    AssignTeamRequest,
    AssignTeamResponse,
    ErrorResponse,
    QrCodeResponse,
    StatsResponse,
    TeamModel,
    TeamsResponse,
)
from teamsorter.repositories.assignment_repo import AssignmentRepository
from teamsorter.services.admin_service import AdminService
from teamsorter.services.assignment_service import AssignmentService
from teamsorter.services.qr_service import QrCodeService, get_qr_service

PACKAGE_DIR = Path(__file__).resolve().parent
STATIC_DIR = PACKAGE_DIR / "static"
ASSIGN_TEAM_PATH = "/api/assign-team"

templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logger()
    init_db()
    logger.info("Database ready, teams: {}", ", ".join(t.name for t in get_team_roster()))
    logger.info("Dashboard: http://localhost:{}", config_settings.PORT)
    logger.info("Admin panel: http://localhost:{}/admin", config_settings.PORT)
    yield
    close_db()
    logger.info("Database connection closed")


app = FastAPI(
    title="Team Sorter",
    description="Assigns each visitor to a random team, once.",
    version="0.1.0",
    lifespan=lifespan,
)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


def get_assignment_service(
    db: Session = Depends(get_db),
    teams: TeamRoster = Depends(get_team_roster),
) -> AssignmentService:
    return AssignmentService(AssignmentRepository(db, teams), teams)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump()
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected request body on {}: {}", request.url.path, exc.errors())
    if request.url.path == ASSIGN_TEAM_PATH:
        return _error(status.HTTP_400_BAD_REQUEST, "Name is required")
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request")


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(UnknownTeam)
async def unknown_team_handler(request: Request, exc: UnknownTeam):
    logger.error("Stored team is missing from the configured roster: {}", exc.team)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Team configuration error")


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.opt(exception=exc).error("Storage failure on {}", request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error")


@app.get("/", include_in_schema=False)
def dashboard():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/team", include_in_schema=False)
def assignment_page():
    return FileResponse(STATIC_DIR / "team.html")


@app.get(
    "/api/generate-qr",
    response_model=QrCodeResponse,
    responses={500: {"model": ErrorResponse}},
    summary="QR code linking to the assignment page",
)
def generate_qr(request: Request, qr_service: QrCodeService = Depends(get_qr_service)):
    base_url = config_settings.PUBLIC_BASE_URL or str(request.base_url)
    assignment_url = base_url.rstrip("/") + config_settings.ASSIGNMENT_PATH

    try:
        qr_code = qr_service.to_data_uri(assignment_url)
    except Exception:
        logger.exception("Error generating QR code for {}", assignment_url)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate QR code")

    return QrCodeResponse(qr_code=qr_code, url=assignment_url)


@app.post(
    ASSIGN_TEAM_PATH,
    response_model=AssignTeamResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    status_code=status.HTTP_200_OK,
    summary="Assign a visitor to a team",
)
def assign_team(
    body: AssignTeamRequest,
    assignment_service: AssignmentService = Depends(get_assignment_service),
):
    """
    Returns the visitor's team. The first request for an identity key picks a
    random team and stores it; every later request returns the stored team.
    """
    result = assignment_service.assign(body.identity_key)

    return AssignTeamResponse(
        name=result.identity_key,
        team=result.team,
        color=result.color,
        emoji=result.emoji,
        is_new_assignment=result.is_new,
    )


@app.get(
    "/api/stats",
    response_model=StatsResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Assignment count per team",
)
def get_stats(assignment_service: AssignmentService = Depends(get_assignment_service)):
    return StatsResponse(stats=assignment_service.statistics())


@app.get("/api/teams", response_model=TeamsResponse, summary="Configured teams")
def get_teams(teams: TeamRoster = Depends(get_team_roster)):
    return TeamsResponse(teams=[TeamModel.model_validate(team) for team in teams])


@app.get("/admin", response_class=HTMLResponse, include_in_schema=False)
def admin_panel(
    request: Request,
    assignment_service: AssignmentService = Depends(get_assignment_service),
):
    # NOTE: read-only but unauthenticated; anyone who can reach the server sees every name
    try:
        overview = AdminService(assignment_service).overview()
    except TeamSorterError:
        logger.exception("Error loading admin panel")
        return HTMLResponse(
            "Error loading admin panel", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return templates.TemplateResponse(request, "admin.html", {"overview": overview})


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(
        "teamsorter.main:app",
        host=config_settings.HOST,
        port=config_settings.PORT,
    )
