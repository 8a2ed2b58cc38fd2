# agamotto/api/dependencies.py
from fastapi import Depends
from sqlalchemy.orm import Session
from ..database import get_db
from ..services.record_store import SQLRecordStore

def get_store(db: Session = Depends(get_db)):
    """
    Record store dependency
    One store handle per request, closed when the request ends
    """
    store = SQLRecordStore(db)
    try:
        yield store
    finally:
        store.close()
