"""Run the Lody waitlist service locally: python main.py"""
import uvicorn

from lody.core.config import settings

if __name__ == "__main__":
    uvicorn.run("lody.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
