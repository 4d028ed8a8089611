"""
ARTEMIS_BLOCKS — FastAPI app
Démarrer : uvicorn artemis_blocks.api.main:app --port 3001
      ou : python -m artemis_blocks.api.main   (PORT, HOST)
"""
import logging, os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..errors import InvalidInput, SelectionError

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

PORT = int(os.getenv("PORT", "3001"))
HOST = os.getenv("HOST", "0.0.0.0")

app = FastAPI(title="ARTEMIS_BLOCKS — Sélection de blocks", version="1.0.0", docs_url="/docs")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.exception_handler(SelectionError)
async def selection_error(request: Request, exc: SelectionError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    """Corps absent, JSON cassé ou pas un objet → même 400 que blockIds invalide."""
    log.warning("Corps de requête rejeté sur %s", request.url.path)
    return JSONResponse({"error": InvalidInput.message}, status_code=400)


@app.on_event("startup")
def startup():
    from ..catalog import seed_if_empty
    from ..database import SessionLocal, init_db
    init_db()
    with SessionLocal() as db:
        seed_if_empty(db)
    log.info("Server running on port %d", PORT)


@app.get("/health")
def health():
    return {"status": "ok", "service": "artemis_blocks", "version": "1.0.0"}


# ── Routes ──
from .routes import blocks, selections

app.include_router(blocks.router)
app.include_router(selections.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
