"""
Development entry point. In production run:  uvicorn shiftly.app:app
"""

import uvicorn

from shiftly.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "shiftly.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
