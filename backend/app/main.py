from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.shared.core.config import settings
from app.shared.core.logging import setup_logging
from app.shared.middleware.correlation import CorrelationIdMiddleware
from app.modules.flow_builder.api import flow_endpoints

setup_logging(settings.LOG_LEVEL.upper())

app = FastAPI(title=settings.PROJECT_NAME)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request tracing
app.add_middleware(CorrelationIdMiddleware)

# Flow Builder Router
app.include_router(flow_endpoints.router, prefix=f"{settings.API_V1_STR}/flows", tags=["Flow Builder"])

@app.get("/")
def root():
    return {"message": "Klaviyo Flow Builder API is running"}
