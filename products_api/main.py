# products_api/main.py
"""FastAPI application for the product service.

Run with ``products-api`` (or ``python -m products_api.main``), or point
any ASGI server at ``products_api.main:app``.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List

import uvicorn
from fastapi import APIRouter, Body, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core import CREATE_PREFIX, UPDATE_PREFIX
from .database import ProductStore, close_store, get_store, open_store
from .errors import NotFoundError, StoreError, ValidationError
from .logging_config import setup_logging
from .models import ErrorBody, Message, Product
from .sdk import (
    create_product_logic,
    delete_product_logic,
    get_product_logic,
    list_products_logic,
    update_product_logic,
)

logger = logging.getLogger(__name__)

WRITE_METHODS = ("POST", "PUT")

router = APIRouter(prefix="/api/products", tags=["products"])


# ---------------------------
# Product endpoints
# ---------------------------
@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED,
             responses={400: {"model": ErrorBody}})
async def create_product(
    payload: Dict[str, Any] = Body(...),
    store: ProductStore = Depends(get_store),
):
    return await create_product_logic(store, payload)


@router.get("", response_model=List[Product], responses={500: {"model": ErrorBody}})
async def list_products(store: ProductStore = Depends(get_store)):
    return await list_products_logic(store)


@router.get("/{product_id}", response_model=Product,
            responses={404: {"model": Message}, 500: {"model": ErrorBody}})
async def get_product(product_id: str, store: ProductStore = Depends(get_store)):
    return await get_product_logic(store, product_id)


@router.put("/{product_id}", response_model=Product,
            responses={400: {"model": ErrorBody}, 404: {"model": Message}})
async def update_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    store: ProductStore = Depends(get_store),
):
    return await update_product_logic(store, product_id, payload)


@router.delete("/{product_id}", response_model=Message,
               responses={404: {"model": Message}, 500: {"model": ErrorBody}})
async def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
    return await delete_product_logic(store, product_id)


# ---------------------------
# Error translation
# ---------------------------
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})


async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": exc.message})


async def store_error_handler(request: Request, exc: StoreError):
    logger.warning("store error on %s %s: %s", request.method, request.url.path, exc.message)
    # create and update report every failure as a bad request
    if request.method in WRITE_METHODS:
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # FastAPI answers 422 by default; this surface only knows 400 for bad bodies
    prefix = UPDATE_PREFIX if request.method == "PUT" else CREATE_PREFIX
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"{prefix}: request body must be a JSON object"},
    )


# ---------------------------
# App factory
# ---------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    await open_store(settings)
    yield
    await close_store()


def create_app() -> FastAPI:
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.api_title, version=settings.api_version, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(router)

    @app.get("/health")
    async def health(store: ProductStore = Depends(get_store)):
        try:
            await store.ping()
        except StoreError:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "ok", "store": "down"},
            )
        return {"status": "ok", "store": "up"}

    return app


app = create_app()


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
