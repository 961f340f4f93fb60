import logging

from fastapi import FastAPI, Depends, Security, HTTPException
from fastapi.security import APIKeyQuery, APIKeyHeader
from starlette.middleware.cors import CORSMiddleware

from telegram_media_deserialize.configs import settings
from telegram_media_deserialize.const import RECONSTRUCTION_RESPONSE_HEADERS
from telegram_media_deserialize.middleware import DocsAccessControlMiddleware
from telegram_media_deserialize.routes import deserialize_router

logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
app = FastAPI(title="Telegram Media Deserialize")
api_password_query = APIKeyQuery(name="api_password", auto_error=False)
api_password_header = APIKeyHeader(name="api_password", auto_error=False)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=RECONSTRUCTION_RESPONSE_HEADERS,
)
app.add_middleware(DocsAccessControlMiddleware)


async def verify_api_key(api_key: str = Security(api_password_query), api_key_alt: str = Security(api_password_header)):
    """
    Verifies the API key for the request.

    Args:
        api_key (str): The API key to validate.
        api_key_alt (str): The alternative API key to validate.

    Raises:
        HTTPException: If the API key is invalid.
    """
    if not settings.api_password:
        return

    if api_key == settings.api_password or api_key_alt == settings.api_password:
        return

    raise HTTPException(status_code=403, detail="Could not validate credentials")


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


app.include_router(
    deserialize_router, prefix="/deserialize", tags=["deserialize"], dependencies=[Depends(verify_api_key)]
)


def run():
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8888, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
