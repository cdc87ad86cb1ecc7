#!/usr/bin/env python
"""Script to run the task API server."""
import os
from pathlib import Path

import uvicorn

from taskapi.config import HOST, PORT, RELOAD

if __name__ == "__main__":
    # Relative sqlite paths and .env resolve against the project root
    os.chdir(Path(__file__).resolve().parent)

    uvicorn.run(
        "taskapi.main:app",
        host=HOST,
        port=PORT,
        reload=RELOAD,
    )
