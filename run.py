from telegram_media_deserialize.configs import settings
from telegram_media_deserialize.main import app

# Run the deserialize API
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=7860, log_level=settings.log_level.lower())
