# ideagen/__init__.py
"""
Keep this file minimal so 'ideagen' is always a proper package.

Do NOT import submodules here. Tests and runtime import from 'ideagen.main':
    from ideagen.main import create_app
And Uvicorn should use:
    uvicorn ideagen.main:app
"""
