#!/usr/bin/env python3
"""
Run script for the Voice Coach backend
"""
import uvicorn

from voice_coach.config.settings import settings
from voice_coach.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
