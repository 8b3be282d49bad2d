"""Image relay package.

A small HTTP relay that forwards a prompt and an image to a hosted
image-generation model, polls the prediction to completion and returns the
resulting image URL, with a per-client daily quota.
"""

__version__ = "1.0.0"
__description__ = "Image generation relay"

from main import app, create_app

__all__ = ["app", "create_app"]
