"""
SafeMeds - FastAPI Backend
Personalized medication safety checks.
Photo / drug name → identification → openFDA label → profile-aware verdict
"""

from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from the backend directory
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from safemeds import __version__
from safemeds.analysis_router import router as analysis_router, get_app_config
from safemeds.analysis.cross_cutting.logging import configure_logging


_config = get_app_config()
configure_logging(_config.logging)

app = FastAPI(
    title="SafeMeds API",
    description="Medication safety verdicts from a photo or drug name, checked against a health profile",
    version=__version__
)

app.include_router(analysis_router)

# NOTE: restrict allow_origins to the client's domains in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # must be False with "*"
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    return {"message": "SafeMeds API", "status": "active", "model": _config.model.type}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
