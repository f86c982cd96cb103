from typing import Optional

from fastapi import APIRouter, HTTPException

from catering_api.services import kakao_local

router = APIRouter()


@router.get("/search-address")
def search_address(query: Optional[str] = None):
    if not query:
        raise HTTPException(400, "Query parameter is required")
    return kakao_local.search_address(query)


@router.get("/coord2address")
def coord2address(x: Optional[str] = None, y: Optional[str] = None):
    if not x or not y:
        raise HTTPException(400, "x and y parameters are required")
    return kakao_local.coord_to_address(x, y)
