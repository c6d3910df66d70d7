"""
exposure/api.py
─────────────────────────────────────────────────────────────────────────────
Chat Exposure — Dual-mode API layer

TWO USAGE MODES:
  1. Importable module:
         from exposure.api import ExposureAPI
         api = ExposureAPI()
         result = api.analyse_file(Path("conversations.json"))

  2. FastAPI HTTP server (results page fetches from it):
         python -m exposure.api                   # default: port 8765
         python -m exposure.api --port 9000
         uvicorn exposure.api:app --port 8765

ENDPOINTS:
  POST /analyse           — body is the raw export JSON → AnalysisResult
  POST /analyse/file      — {"path": ".../conversations.json"} → AnalysisResult
  GET  /config            — current config + auto-detected export path
  POST /config            — save config
  GET  /health            — liveness

CORS: localhost-only (127.0.0.1 / ::1). Not exposed to network by default.

PRIVACY NOTE:
  The export is analysed in-process and never stored. No external HTTP
  calls are made by this module. Message content is never logged.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from exposure import __version__
from exposure.config import auto_detect_export, load_config, save_config
from exposure.parsers.export_parser import load_export_bytes, load_export_file
from exposure.report import analyse_chat_history, result_to_dict
from exposure.report_export import export_to_dict

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# IMPORTABLE CLASS
# ═══════════════════════════════════════════════════════════════════════════

class ExposureAPI:
    """
    Pure-Python API around the analysis engine.
    No HTTP layer required — import and call directly.

    Usage:
        api    = ExposureAPI()
        result = api.analyse_payload(json.load(fp))
        result = api.analyse_bytes(upload_bytes)
        result = api.analyse_file(Path("conversations.json"), envelope=True)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, project_root: Optional[Path] = None):
        self.project_root = project_root
        self.config = config if config is not None else load_config(project_root)

    # ── ANALYSIS ──────────────────────────────────────────────────────────

    def analyse_payload(self, data: Any, envelope: bool = False,
                        source: Optional[str] = None) -> Dict[str, Any]:
        """
        Analyse already-parsed export JSON.
        Odd shapes degrade to an all-zero result rather than raising.
        """
        result = analyse_chat_history(data)
        if envelope:
            return export_to_dict(result, source=source)
        return result_to_dict(result)

    def analyse_bytes(self, raw: bytes, envelope: bool = False) -> Dict[str, Any]:
        """Analyse raw upload bytes. Raises InvalidExportError on bad JSON."""
        logger.info(f"Analyse started | {len(raw)} bytes")
        return self.analyse_payload(load_export_bytes(raw), envelope=envelope, source="upload")

    def analyse_file(self, path: Path, envelope: bool = False) -> Dict[str, Any]:
        """
        Analyse an export file on disk.

        Security: path is validated — must be an existing .json file.
        """
        path = Path(path).resolve()

        # ── Input validation ───────────────────────────────────────────
        if not path.exists():
            raise ValueError(f"Export does not exist: {path}")
        if not path.is_file():
            raise ValueError(f"Export is not a file: {path}")
        if path.suffix.lower() != ".json":
            raise ValueError(f"Please upload a JSON file: {path.name}")

        logger.info(f"Analyse started | file={path.name}")
        result = self.analyse_payload(load_export_file(path), envelope=envelope,
                                      source=path.name)
        logger.info(f"Analyse complete | file={path.name}")
        return result


# ═══════════════════════════════════════════════════════════════════════════
# FASTAPI HTTP APP
# ═══════════════════════════════════════════════════════════════════════════

class AnalyseFileRequest(BaseModel):
    path:     Optional[str] = None      # uses config export_path if empty
    envelope: bool = False


def _build_app(api: Optional[ExposureAPI] = None) -> FastAPI:
    """
    Build and return the FastAPI application instance.
    Called once at module level or on demand (tests, custom config).
    """
    _api = api or ExposureAPI()

    _app = FastAPI(
        title       = "Chat Exposure API",
        description = "Privacy exposure analysis for chat-history exports — local API",
        version     = __version__,
        docs_url    = "/docs",
        redoc_url   = None,
    )

    # CORS: only allow localhost origins
    _app.add_middleware(
        CORSMiddleware,
        allow_origins     = [
            "http://localhost",
            "http://localhost:3000",
            "http://localhost:8765",
            "http://127.0.0.1",
            "http://127.0.0.1:8765",
            "null",   # file:// origin
        ],
        allow_methods     = ["GET", "POST", "OPTIONS"],
        allow_headers     = ["Content-Type"],
        allow_credentials = False,
    )

    # ── ENDPOINTS ───────────────────────────────────────────────────────

    @_app.post("/analyse", summary="Analyse an uploaded export")
    async def analyse(request: Request, envelope: bool = False):
        """
        Body is the raw export JSON — a conversation object with a
        `mapping`, or an array of them. Invalid JSON → 400.
        Analysis runs in the threadpool, off the event loop.
        """
        raw = await request.body()
        try:
            return await run_in_threadpool(_api.analyse_bytes, raw, envelope=envelope)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except Exception as exc:
            logger.error(f"Analyse endpoint error: {exc}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Analysis failed: {exc}")

    @_app.post("/analyse/file", summary="Analyse an export file on this machine")
    def analyse_file(req: AnalyseFileRequest):
        path_val = req.path or _api.config.get("export_path")
        if not path_val:
            detected = auto_detect_export()
            path_val = str(detected) if detected else None
        if not path_val:
            raise HTTPException(status_code=400, detail="path required. Set export_path in config or provide in request.")
        try:
            return _api.analyse_file(Path(path_val), envelope=req.envelope)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except Exception as exc:
            logger.error(f"Analyse file endpoint error: {exc}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Analysis failed: {exc}")

    @_app.get("/config", summary="Get config")
    def get_config():
        """Returns current config with the auto-detected export path."""
        detected = auto_detect_export()
        return {
            "config": _api.config,
            "auto_detected_export": str(detected) if detected else None,
        }

    @_app.post("/config", summary="Save config")
    def save_config_endpoint(update: Dict[str, Any] = Body(...)):
        """Persist config."""
        try:
            _api.config.update(update)
            save_config(_api.config, _api.project_root)
            return {"status": "ok", "config": _api.config}
        except OSError as exc:
            raise HTTPException(status_code=500, detail=str(exc))

    @_app.get("/health", summary="Health check")
    def health():
        return {
            "status":  "ok",
            "version": __version__,
        }

    return _app


# Module-level app instance — used by uvicorn exposure.api:app
app = _build_app()


# ═══════════════════════════════════════════════════════════════════════════
# CLI ENTRYPOINT — python -m exposure.api
# ═══════════════════════════════════════════════════════════════════════════

def serve(host: str = "127.0.0.1", port: int = 8765, project_root: Optional[Path] = None) -> None:
    import uvicorn

    server_app = _build_app(ExposureAPI(project_root=project_root))
    print(f"""
+--------------------------------------------------+
|   Chat Exposure API Server v{__version__:<21}|
+--------------------------------------------------+
|  Local:    http://{host}:{port}
|  Docs:     http://{host}:{port}/docs
|  Health:   http://{host}:{port}/health
+--------------------------------------------------+
|  PRIVACY: Bound to localhost only. Exports are    |
|  analysed in memory and never stored.            |
+--------------------------------------------------+
""")
    uvicorn.run(server_app, host=host, port=port, log_level="info")


def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(
        prog        = "exposure.api",
        description = "Chat Exposure API Server — serves the results page on localhost",
    )
    cfg = load_config()
    parser.add_argument("--port", type=int, default=cfg["api_port"],
                        help="Port to bind (default: 8765)")
    parser.add_argument("--host", type=str, default=cfg["api_host"],
                        help="Host to bind — DO NOT change to 0.0.0.0 on shared networks")
    args = parser.parse_args()
    serve(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
