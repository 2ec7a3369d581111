"""
LitMind API - FastAPI backend for the recommendation engine
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import find_dotenv, load_dotenv

from .routes import recommendations

# Load local .env automatically so provider keys and backends apply in API mode.
load_dotenv(find_dotenv(usecwd=True), override=False)

app = FastAPI(
    title="LitMind API",
    description="Personalized literature recommendations",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": "0.1.0"}


app.include_router(recommendations.router, prefix="/api", tags=["Recommendations"])


@app.on_event("shutdown")
async def _shutdown_recommendations():
    await recommendations.shutdown_recommendations()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
