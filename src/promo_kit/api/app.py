from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field

from promo_kit.assembly.render import render_palette_strip
from promo_kit.config import settings
from promo_kit.logging_setup import setup_logging
from promo_kit.palette.errors import PaletteError
from promo_kit.palette.extract import extract_palette
from promo_kit.palette.roles import ColorRoles, assign_roles, theme_css_vars

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(level=settings.log_level, log_dir=settings.log_dir)
    # One pooled client for all URL fetches of this process.
    async with httpx.AsyncClient() as client:
        app.state.http = client
        yield


app = FastAPI(title="promo_kit palette service", lifespan=lifespan)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


class PaletteRequest(BaseModel):
    images: list[str] = Field(default_factory=list)
    k: int = Field(default_factory=lambda: settings.palette_default_k)


class RolesRequest(BaseModel):
    palette: list[str] = Field(default_factory=list)


def _remote_sources_or_400(sources: list[str]) -> list[str]:
    # Local paths are only valid for in-process callers, never over HTTP.
    cleaned = [s.strip() for s in sources if s and s.strip()]
    for s in cleaned:
        lowered = s[:8].lower()
        if not (lowered.startswith("http://") or lowered.startswith("https://") or lowered.startswith("data:")):
            logger.info("rejected non-URL image source from client")
            raise HTTPException(status_code=400, detail="images must be http(s) or data: URLs")
    return cleaned


def _http_client(request: Request) -> httpx.AsyncClient | None:
    return getattr(request.app.state, "http", None)


def _palette_payload(palette: list[str], roles: ColorRoles) -> dict[str, Any]:
    return {"palette": palette, "roles": roles.as_dict(), "theme": theme_css_vars(roles)}


def _k_or_400(k: int) -> int:
    if k > settings.palette_max_k:
        raise HTTPException(status_code=400, detail=f"cluster count must be <= {settings.palette_max_k}, got {k}")
    return k


async def _extract_or_400(sources: list[Any], k: int, client: httpx.AsyncClient | None) -> list[str]:
    k = _k_or_400(k)
    try:
        return await extract_palette(sources, k, client=client)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _roles_or_400(palette: list[str]) -> ColorRoles:
    try:
        return assign_roles(palette)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    return templates.TemplateResponse(
        request=request,
        name="index.html",
        context={"urls": "", "palette": [], "roles": None, "theme": {}, "k": settings.palette_default_k, "error": None},
    )


@app.post("/palette/preview", response_class=HTMLResponse)
async def palette_preview(
    request: Request,
    urls: str = Form(""),
    k: int = Form(settings.palette_default_k),
):
    sources = _remote_sources_or_400(urls.splitlines())
    k = _k_or_400(k)
    error: str | None = None
    palette: list[str] = []
    roles: ColorRoles | None = None
    try:
        palette = await extract_palette(sources, k, client=_http_client(request))
        roles = assign_roles(palette)
    except PaletteError as exc:
        error = str(exc)

    return templates.TemplateResponse(
        request=request,
        name="index.html",
        context={
            "urls": urls,
            "palette": palette,
            "roles": roles,
            "theme": theme_css_vars(roles) if roles else {},
            "k": k,
            "error": error,
        },
        status_code=400 if error else 200,
    )


@app.post("/api/palette")
async def palette_from_urls(request: Request, body: PaletteRequest):
    palette = await _extract_or_400(_remote_sources_or_400(body.images), body.k, _http_client(request))
    return _palette_payload(palette, assign_roles(palette))


@app.post("/api/palette/upload")
async def palette_from_uploads(
    request: Request,
    k: int = Form(settings.palette_default_k),
    files: list[UploadFile] = File(...),
):
    # Read only what extraction will look at, and no more than the download cap per file.
    limit = settings.image_max_bytes
    contents: list[bytes] = []
    for f in files[: settings.palette_max_images]:
        data = await f.read(limit + 1)
        if len(data) > limit:
            logger.warning("skipping upload %s: over %d bytes", f.filename, limit)
            continue
        contents.append(data)
    palette = await _extract_or_400(contents, k, _http_client(request))
    return _palette_payload(palette, assign_roles(palette))


@app.post("/api/roles")
def roles_for_palette(body: RolesRequest):
    roles = _roles_or_400(body.palette)
    return {"roles": roles.as_dict(), "theme": theme_css_vars(roles)}


@app.post("/api/palette/swatches.png")
def palette_swatches(body: RolesRequest):
    roles = _roles_or_400(body.palette)
    rendered = render_palette_strip(body.palette, roles=roles)
    return Response(content=rendered.to_png_bytes(), media_type="image/png")
