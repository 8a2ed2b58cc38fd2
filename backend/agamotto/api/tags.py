# agamotto/api/tags.py
from fastapi import APIRouter, Depends, HTTPException
from ..schemas.tag import TagCreate, TagResponse, TagListResponse, AvailableColorsResponse
from ..services.errors import StoreWriteError, TagAlreadyExistsError, TagLimitExceededError
from ..services.record_store import RecordStore
from ..services.tag_palette import MAX_TAGS
from ..services.tag_service import create_tag, get_available_colors
from .dependencies import get_store

router = APIRouter()

@router.get("/", response_model=TagListResponse)
async def list_tags(store: RecordStore = Depends(get_store)):
    """
    List all tags, most recently used first
    """
    tags = await store.get_all_tags()
    return TagListResponse(
        tags=[TagResponse.model_validate(t) for t in tags],
        total=len(tags),
        max_tags=MAX_TAGS
    )

@router.get("/colors/available", response_model=AvailableColorsResponse)
async def list_available_colors(store: RecordStore = Depends(get_store)):
    """
    Palette colors not used by any tag, in assignment order
    """
    return AvailableColorsResponse(colors=await get_available_colors(store))

@router.post("/",
             response_model=TagResponse,
             status_code=201,
             summary="Create Tag",
             description="""
             Create a tag with the next available palette color.
             
             **Error Handling**:
             - 409 if a tag with the same (case-sensitive) name exists
             - 400 if every palette color is already in use
             """)
async def post_tag(
    payload: TagCreate,
    store: RecordStore = Depends(get_store)
):
    """Create a tag"""
    try:
        return await create_tag(store, payload.name)
    except TagAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (TagLimitExceededError, StoreWriteError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.delete("/{name}", status_code=204)
async def delete_tag(
    name: str,
    store: RecordStore = Depends(get_store)
):
    """
    Delete a tag and free its color
    Sessions keep their embedded tag snapshot
    """
    if not await store.delete_tag(name):
        raise HTTPException(status_code=404, detail=f"Tag '{name}' not found")
    
    return None
