import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from relay_monitor.config import CORS_ORIGINS, HOST, LOG_FORMAT, LOG_LEVEL, PORT
from relay_monitor.errors import ApiError
from relay_monitor.routers import readings, thresholds

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

app = FastAPI(title="Relay Monitoring API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Routes
app.include_router(readings.router)
app.include_router(thresholds.router)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.get("/")
def root():
    return RedirectResponse(url="/docs", status_code=302)


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=HOST,
        port=PORT,
        reload=False,
    )
