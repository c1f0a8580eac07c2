"""Serverless entrypoint exposing the bakeries ASGI app."""

import os
import sys

# Vercel runs functions from the api/ directory; make the src package importable
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.app import app  # noqa: E402,F401
