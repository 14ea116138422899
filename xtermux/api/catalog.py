"""FastAPI Router: the scripts catalog."""

from typing import List

from fastapi import APIRouter, HTTPException, Query

from xtermux.api.models import ScriptItem, ScriptPage
from xtermux.catalog.scripts import (
    ALL_CATEGORIES,
    CATEGORIES,
    ITEMS_PER_PAGE,
    Category,
    Script,
    filter_scripts,
    get_script,
    paginate,
    risk_level,
)

router = APIRouter(prefix="/api/scripts")


def to_item(script: Script) -> ScriptItem:
    return ScriptItem(**script.model_dump(), risk_level=risk_level(script.category))


@router.get("", response_model=ScriptPage)
def list_scripts(
    search: str = "",
    category: str = ALL_CATEGORIES,
    offset: int = Query(0, ge=0),
    limit: int = Query(ITEMS_PER_PAGE, ge=1, le=100),
):
    """
    Search the catalog.

    Query Parameters
    ----------------
    search : str
        Case-insensitive substring of the name or description.
    category : str
        One of the category names; ``All`` disables the filter.
    offset, limit : int
        Window for "load more" paging, 10 items per page by default.
    """
    matches = filter_scripts(search=search, category=category)
    page, has_more = paginate(matches, offset=offset, limit=limit)
    return ScriptPage(items=[to_item(s) for s in page], total=len(matches), has_more=has_more)


@router.get("/categories", response_model=List[Category])
def list_categories():
    return CATEGORIES


@router.get("/{script_id}", response_model=ScriptItem)
def script_detail(script_id: str):
    script = get_script(script_id)
    if script is None:
        raise HTTPException(status_code=404, detail="Script not found")
    return to_item(script)
