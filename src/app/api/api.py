import os

from loguru import logger
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from dotenv import load_dotenv
import asyncio

from src.metrics_setup import init_metrics, record_selection, time_histogram
from src.logging_setup import setup_logging, span

from src.app.selector.config import SelectorSettings
from src.app.selector.errors import SelectionError
from src.app.selector.orchestrator import Selector

## API OBJECTS
class SelectRequest(BaseModel):
    vectors: List[List[float]] = Field(..., description="Embedding vectors, one per input item, all of the same length")
    k: Optional[int] = Field(None, description="Number of items to return; omit to stop at the saturation point")
    saturation_ratio: Optional[float] = Field(None, description="Override of the gain ratio that ends automatic selection")
    saturation_window: Optional[int] = Field(None, description="Override of the consecutive saturated picks needed to stop")

class SelectResponse(BaseModel):
    indices: List[int] = Field(..., description="Selected input indices in pick order")
    gains: List[float] = Field(..., description="Marginal coverage gain recorded at each pick")
    meta: Dict[str, Any] = Field(..., description="Audit data (k, mode, n, dim, saturated, cutoff_gain, evaluations, coverage)")

# ------------------------
# App setup
# ------------------------

def create_app() -> FastAPI:
    load_dotenv()
    setup_logging(app_name="diverse_select_api")
    METRICS = init_metrics("diverse_select_api")

    app = FastAPI(
        title="Diverse Select API",
        version="1.0.0",
        description="Selects a diverse, representative subset of embedding vectors via lazy-greedy facility location."
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Settings are read once; selections share nothing else between requests
    state: Dict[str, Any] = {}

    @app.on_event("startup")
    def _startup():
        with span("startup"):
            state["settings"] = SelectorSettings.from_env()
            state["selector"] = Selector(settings=state["settings"])
            logger.info("Startup complete. Selector ready.", max_items=state["settings"].max_items)

    def deps():
        if not state:
            raise HTTPException(status_code=503, detail="Service not ready")
        return state

    # ------------------------
    # /select endpoint
    # ------------------------
    @app.post("/select", response_model=SelectResponse, summary="Select a diverse subset of vectors")
    async def select(payload: SelectRequest, dep=Depends(deps)):
        mode = "fixed" if payload.k is not None else "auto"
        try:
            with span("handler.select", n=len(payload.vectors), k=payload.k):
                if len(payload.vectors) > dep["settings"].max_items:
                    raise HTTPException(
                        status_code=422,
                        detail=f"Too many vectors: {len(payload.vectors)} (max {dep['settings'].max_items})",
                    )

                selector = dep["selector"]
                if payload.saturation_ratio is not None or payload.saturation_window is not None:
                    selector = Selector(
                        saturation_ratio=payload.saturation_ratio,
                        saturation_window=payload.saturation_window,
                        settings=dep["settings"],
                    )

                with time_histogram(METRICS["select_latency_ms"], mode=mode):
                    result = await asyncio.to_thread(selector.select, payload.vectors, payload.k)
                record_selection(METRICS, result, mode=mode)

                out = result.to_dict()
                return SelectResponse(
                    indices=out.pop("indices"),
                    gains=out.pop("gains"),
                    meta=out,
                )
        except HTTPException:
            METRICS["invalid_requests_total"].add(1, attributes={"mode": mode})
            raise
        except SelectionError as e:
            METRICS["invalid_requests_total"].add(1, attributes={"mode": mode})
            logger.warning("select.rejected", reason=str(e), error=type(e).__name__)
            raise HTTPException(status_code=422, detail=str(e))
        except Exception as e:
            logger.exception("Unhandled error in /select")
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/health", include_in_schema=False)
    def health():
        return {"ok": True}

    return app
