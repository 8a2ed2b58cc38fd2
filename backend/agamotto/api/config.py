# agamotto/api/config.py
from fastapi import APIRouter, Depends, HTTPException
from ..schemas.config import ConfigValue, ConfigUpdate, ConfigListResponse
from ..services.errors import StoreWriteError
from ..services.record_store import RecordStore
from .dependencies import get_store

router = APIRouter()

@router.get("/", response_model=ConfigListResponse)
async def get_all_config(store: RecordStore = Depends(get_store)):
    """
    Get all config values
    """
    return ConfigListResponse(config=await store.get_all_config())

@router.get("/{key}", response_model=ConfigValue)
async def get_config(key: str, store: RecordStore = Depends(get_store)):
    """
    Get a config value (null when unset)
    """
    return ConfigValue(key=key, value=await store.get_config(key))

@router.put("/{key}", response_model=ConfigValue)
async def put_config(
    key: str,
    payload: ConfigUpdate,
    store: RecordStore = Depends(get_store)
):
    """
    Save a config value
    """
    try:
        await store.put_config(key, payload.value)
    except StoreWriteError as e:
        raise HTTPException(status_code=400, detail=str(e))
    
    return ConfigValue(key=key, value=payload.value)
