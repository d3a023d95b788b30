# inventory_api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import logic
from .config import Settings, get_settings
from .core import ProductIn, CustomerIn, TransactionIn, _format_errors
from .database import StoreHandle
from .errors import InventoryError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> StoreHandle:
    return request.app.state.store

# ---------------------------
# Product endpoints
# ---------------------------
@router.get("/products")
async def list_products(store: StoreHandle = Depends(get_store)):
    return await logic.products(store).list()

@router.get("/products/{product_id}")
async def get_product(product_id: str, store: StoreHandle = Depends(get_store)):
    return await logic.products(store).get(product_id)

@router.post("/products", status_code=201)
async def create_product(payload: ProductIn, store: StoreHandle = Depends(get_store)):
    return await logic.products(store).create(payload)

@router.put("/products/{product_id}")
async def update_product(product_id: str, payload: Dict[str, Any] = Body(...), store: StoreHandle = Depends(get_store)):
    return await logic.products(store).update(product_id, payload)

@router.delete("/products/{product_id}", status_code=204)
async def delete_product(product_id: str, store: StoreHandle = Depends(get_store)):
    await logic.products(store).delete(product_id)
    return Response(status_code=204)

# ---------------------------
# Customer endpoints
# ---------------------------
@router.get("/customers")
async def list_customers(store: StoreHandle = Depends(get_store)):
    return await logic.customers(store).list()

@router.get("/customers/{customer_id}")
async def get_customer(customer_id: str, store: StoreHandle = Depends(get_store)):
    return await logic.customers(store).get(customer_id)

@router.post("/customers", status_code=201)
async def create_customer(payload: CustomerIn, store: StoreHandle = Depends(get_store)):
    return await logic.customers(store).create(payload)

@router.put("/customers/{customer_id}")
async def update_customer(customer_id: str, payload: Dict[str, Any] = Body(...), store: StoreHandle = Depends(get_store)):
    return await logic.customers(store).update(customer_id, payload)

@router.delete("/customers/{customer_id}", status_code=204)
async def delete_customer(customer_id: str, store: StoreHandle = Depends(get_store)):
    await logic.customers(store).delete(customer_id)
    return Response(status_code=204)

# ---------------------------
# Stock transactions
# ---------------------------
@router.post("/transactions")
async def create_transaction(payload: TransactionIn, store: StoreHandle = Depends(get_store)):
    return await logic.apply_transaction_logic(store, payload)

@router.get("/transactions")
async def list_transactions(store: StoreHandle = Depends(get_store)):
    return await logic.list_transactions_logic(store)

# ---------------------------
# Error translation
# ---------------------------
async def inventory_error_handler(request: Request, exc: InventoryError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _format_errors(exc.errors())})

async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": f"Internal error: {exc}"})

# ---------------------------
# App factory
# ---------------------------
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    store = StoreHandle(settings.db_file, lock_timeout=settings.lock_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await store.initialize()
        logger.info("Store ready at %s", store.path)
        yield

    app = FastAPI(title="inventory-api", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()


def run():
    import uvicorn

    settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
