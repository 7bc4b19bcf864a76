# backend/leaderboard/main.py
import logging
import uuid
from typing import Any, Dict

from fastapi import FastAPI, APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import get_session, Base, engine
from . import crud, ranking
from .config import settings
from .schemas import UserIn, RankingOut, AnonRankingOut, ErrorOut

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


configure_logging()

app = FastAPI(title="Watchtime Leaderboard API")
router = APIRouter()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def init_db():
    Base.metadata.create_all(bind=engine)


@app.middleware("http")
async def assign_invocation_id(request: Request, call_next):
    request.state.invocation_id = uuid.uuid4().hex
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("[%s] Unhandled error on %s %s.", request.state.invocation_id, request.method, request.url.path)
        response = _error(500, "InternalError", "An unexpected error occurred.")
    response.headers["X-Invocation-Id"] = request.state.invocation_id
    return response


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorOut(error=error, error_message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("[%s] Rejected request body: %s", getattr(request.state, "invocation_id", "-"), exc.errors())
    return _error(400, "InvalidRequestBody", "The request body is invalid.")


# ----- Health -----
@router.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True}


# ----- Ranking -----
@router.get(
    "/ranking/position/{user_id}",
    response_model=RankingOut,
    responses={404: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
def get_ranking(user_id: str, request: Request, db: Session = Depends(get_session)):
    inv = request.state.invocation_id
    logger.info("[%s] Processing request for ranking position endpoint.", inv)

    try:
        records = crud.list_records(db)
    except SQLAlchemyError:
        logger.exception("[%s] Failed to read watchtime entries.", inv)
        return _error(500, "InternalError", "The ranking could not be computed.")
    logger.info("[%s] Found %d entries.", inv, len(records))

    try:
        result = ranking.rank_user(records, user_id)
    except ranking.UserNotFoundError:
        logger.error("[%s] User with id %s not found.", inv, user_id)
        return _error(404, "UserNotFound", "The user with the given id was not found.")
    except ranking.InvalidRankingError:
        logger.exception("[%s] Invalid ranking for user %s.", inv, user_id)
        return _error(500, "InternalError", "The ranking could not be computed.")

    logger.info("[%s] User rank: %d for user %s.", inv, result.position, user_id)
    return RankingOut(
        position=result.position,
        total_watchtime=result.total_watchtime,
        closest_neighbors=[
            AnonRankingOut(position=n.position, total_watchtime=n.total_watchtime)
            for n in result.neighbors
        ],
    )


# ----- Write APIs -----
@router.put(
    "/ranking/user",
    status_code=204,
    response_class=Response,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
def put_user(payload: UserIn, request: Request, db: Session = Depends(get_session)):
    inv = request.state.invocation_id
    logger.info("[%s] Processing request for update user endpoint.", inv)

    try:
        rec = crud.upsert_record(db, payload.user_id, payload.total_watchtime)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("[%s] Upsert failed for user %s.", inv, payload.user_id)
        return _error(500, "TableTransactionError", "There was a problem executing the table transaction.")

    logger.info("[%s] Stored watchtime %d for user %s.", inv, rec.total_watchtime, rec.user_id)
    return Response(status_code=204)


@router.delete(
    "/ranking/user/{user_id}",
    status_code=204,
    response_class=Response,
    responses={500: {"model": ErrorOut}},
)
def delete_user(user_id: str, request: Request, db: Session = Depends(get_session)):
    inv = request.state.invocation_id
    logger.info("[%s] Processing request to delete user with userId %s.", inv, user_id)

    try:
        removed = crud.delete_record(db, user_id)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("[%s] Delete failed for user %s.", inv, user_id)
        return _error(
            500,
            "UserDeletionError",
            f"There was an error deleting the user with id {user_id}: {e.__class__.__name__}.",
        )

    if not removed:
        logger.info("[%s] No entry for user %s, nothing deleted.", inv, user_id)
    return Response(status_code=204)


app.include_router(router)

# Uvicorn entrypoint (optional, used only if you run `python -m leaderboard.main`)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("leaderboard.main:app", host="0.0.0.0", port=8000, reload=False)
