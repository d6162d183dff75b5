"""FastAPI application exposing the weather proxy."""

from fastapi import FastAPI

from .api import router as api_router

app = FastAPI(title="Weather Monitoring Dashboard")

# Proxy routes
app.include_router(api_router, prefix="/api")
