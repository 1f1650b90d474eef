from typing import Optional

from fastapi import APIRouter, Request

from ..embed import resolve_embed
from ..errors import MissingTarget
from ..models import EmbedTarget

router = APIRouter(prefix="/api", tags=["core"])


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/embed", response_model=EmbedTarget)
def embed(request: Request, url: Optional[str] = None):
    target = (url or "").strip()
    if not target:
        raise MissingTarget()
    base = request.app.state.settings.public_base_url or str(request.base_url)
    return resolve_embed(target, base)
