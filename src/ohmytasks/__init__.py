"""
Oh My Tasks backend package.

The FastAPI application lives in ``ohmytasks.main``; run it with
``uvicorn ohmytasks.main:app``.
"""
