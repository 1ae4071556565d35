# backend/inventory_api/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from inventory_api.core.config import settings
from inventory_api.core.error_handlers import register_exception_handlers
from inventory_api.core.init_db import init_db
from inventory_api.api import auth, users, orders
from inventory_api.api.catalog import categories_router, products_router, suppliers_router
from inventory_api.api.inventory import dashboard_router, inventory_router
from inventory_api.api.reports import reports_router, search_router
import inventory_api.models  # Implicitly registers models


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(title="Inventory Management API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(orders.router)
app.include_router(categories_router)
app.include_router(suppliers_router)
app.include_router(products_router)
app.include_router(inventory_router)
app.include_router(dashboard_router)
app.include_router(reports_router)
app.include_router(search_router)


@app.get("/health")
async def health():
    return {"status": "healthy"}
