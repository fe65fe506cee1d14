"""FastAPI application exposing SigCheck over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from sigcheck.config import AppConfig
from sigcheck.ingestion.manifest_loader import ManifestError, load_manifest
from sigcheck.models import CheckResult, CheckStatus
from sigcheck.reconcile.reconciler import reconcile
from sigcheck.report import filter_results, sections, summarize

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="SigCheck Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class CheckPayload(BaseModel):
    manifest: str
    directory: str
    status: str | None = None
    section: str | None = None
    search: str | None = None
    workers: int | None = None


def _clean_path(value: str) -> Path:
    return Path(value.strip().replace("\r", "").replace("\n", "")).expanduser()


def _parse_status(value: str | None) -> CheckStatus | None:
    if not value:
        return None
    try:
        return CheckStatus(value.strip().lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown status: {value}")


def _run_check(manifest: Path, directory: Path, config: AppConfig) -> List[CheckResult]:
    documents = load_manifest(manifest)
    return reconcile(documents, directory, config)


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/check")
async def check_package(payload: CheckPayload) -> dict[str, Any]:
    if not payload.manifest.strip() or not payload.directory.strip():
        raise HTTPException(status_code=400, detail="Both manifest and directory are required")

    status = _parse_status(payload.status)
    manifest = _clean_path(payload.manifest)
    directory = _clean_path(payload.directory)

    if not manifest.is_file():
        raise HTTPException(status_code=404, detail=f"Manifest not found: {manifest}")
    if not directory.is_dir():
        raise HTTPException(status_code=404, detail=f"Directory not found: {directory}")

    if payload.workers is not None and payload.workers <= 0:
        raise HTTPException(status_code=400, detail="workers must be positive")
    config = AppConfig(max_workers=payload.workers)

    try:
        results = await asyncio.to_thread(_run_check, manifest, directory, config)
    except ManifestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    shown = filter_results(results, status=status, section=payload.section, search=payload.search)
    return {
        "results": [result.to_dict() for result in shown],
        "stats": summarize(results).as_dict(),
        "sections": sections(results),
    }
