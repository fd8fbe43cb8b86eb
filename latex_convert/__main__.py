import uvicorn

from .main import app, get_settings

settings = get_settings()
uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
