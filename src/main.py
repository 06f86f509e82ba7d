import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import HTMLResponse

from src.api import people_router
from src.common.db import create_tables


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    logging.info("Application starting up...")
    create_tables()

    yield

    logging.info("Application shutting down...")


app = FastAPI(
    lifespan=lifespan,
    title="DataTables Engine API",
    description="Server-side processing for DataTables.js tables backed by SQL models",
    version="0.2.2",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Allow Cross Origin requests from any origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(people_router)


@app.get("/", response_class=HTMLResponse)
def read_root():
    return "DataTables Engine API"
