from __future__ import annotations  # FastAPI server for the mock interview API

import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from agents.resume_parser import extract_fields
from agents.types import ResumeFields
from api.routes import candidate_router, get_service, history_router, router
from config import ORACLE_KEY, AppConfig, bind_model, is_bound, load_config, settings
from llm_gateway import oracle_for, resolve_api_key
from services.resume_text import UnsupportedResumeType, extract_text
from storage.migrate import migrate

logger = logging.getLogger(__name__)


def bind_oracle(cfg: AppConfig) -> bool:  # Bind the Gemini route when an API key is available
    if resolve_api_key(cfg.llm_route) is None:
        logger.warning("No API key for route %s; running on local fallbacks", cfg.llm_route.name)
        return False
    bind_model(ORACLE_KEY, oracle_for(cfg.llm_route))
    return True


@asynccontextmanager
async def lifespan(_: FastAPI):  # Apply migrations and wire configuration at startup
    app_cfg = load_config()
    migrate()
    bind_oracle(app_cfg)
    get_service().policy = app_cfg.scoring
    yield


app = FastAPI(title="Mock Interview API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)
app.include_router(history_router)
app.include_router(candidate_router)


@app.post("/api/parse-resume", response_model=ResumeFields)
async def parse_resume(file: Optional[UploadFile] = File(None)) -> ResumeFields:  # Extract candidate fields from an uploaded resume
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    try:
        text = extract_text(await file.read(), file.filename, file.content_type)
    except UnsupportedResumeType as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not text:
        raise HTTPException(status_code=400, detail="Could not extract text from the resume")
    return extract_fields(text)


@app.get("/api/health")
def health() -> Dict[str, object]:  # Liveness probe
    return {"status": "ok", "oracle": is_bound(ORACLE_KEY)}


@app.get("/")
def root() -> Dict[str, str]:  # Service banner
    return {"message": "Mock Interview API", "docs": "/docs"}
