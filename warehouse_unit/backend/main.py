import logging
import threading
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from .scada.store import ScadaStore
from .settings import WarehouseSettings, load_config
from .simulation.engine import SimulationEngine
from .simulation.factory import build_warehouse

logger = logging.getLogger("WarehouseAPI")


class CustomerRequest(BaseModel):
    requested_items: Optional[int] = Field(default=None, ge=1)


class CapacityRequest(BaseModel):
    max_capacity: int = Field(ge=0)


def create_app(engine: Optional[SimulationEngine] = None,
               settings: Optional[WarehouseSettings] = None,
               start_loop: bool = True) -> FastAPI:
    """
    Build the API around one simulation engine.

    With start_loop=False the caller drives engine.step() itself (tests).
    """
    if engine is None:
        engine = build_warehouse(settings)

    app = FastAPI(title="Warehouse Logistics Twin API")
    app.state.engine = engine
    app.state.store = store = ScadaStore()
    app.state.thread = None

    # Allow CORS for the visualisation front-end
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    engine.set_post_step_callback(lambda: store.update(engine.get_all_tags()))
    store.update(engine.get_all_tags())

    @app.on_event("startup")
    def startup_event():
        if not start_loop:
            return
        app.state.thread = threading.Thread(target=engine.run_loop, daemon=True)
        app.state.thread.start()

    @app.on_event("shutdown")
    def shutdown_event():
        engine.stop()
        if app.state.thread:
            app.state.thread.join(timeout=2.0)

    @app.get("/")
    def read_root():
        return {"status": "ok", "service": "Warehouse Logistics Twin"}

    @app.get("/api/state")
    def get_state():
        """Returns the full SCADA state snapshot."""
        return store.get_all()

    @app.get("/api/metrics")
    def get_metrics():
        return engine.get_production_metrics()

    @app.post("/api/customers", status_code=201)
    def spawn_customer(request: CustomerRequest):
        try:
            customer = engine.spawn_customer(request.requested_items)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        store.update(engine.get_all_tags())
        return {"customer_id": customer.id, "requested_items": customer.requested_items}

    @app.put("/api/warehouse/capacity")
    def set_capacity(request: CapacityRequest):
        try:
            engine.set_max_capacity(request.max_capacity)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        store.update(engine.get_all_tags())
        return {"max_capacity": engine.storage.max_capacity}

    return app


def main():
    logging.basicConfig(level=logging.INFO, format='[WMS] %(asctime)s | %(name)s | %(message)s',
                        datefmt='%H:%M:%S')
    settings = load_config()
    app = create_app(settings=settings)
    uvicorn.run(app, host="0.0.0.0", port=settings.api_port)


if __name__ == "__main__":
    main()
