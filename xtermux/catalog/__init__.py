"""
Static content served by the API: the scripts catalog and the setup guides.

Both are bundled as JSON under `data/` and validated into Pydantic models
on first use.
"""
