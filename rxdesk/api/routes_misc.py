# rxdesk/api/routes_misc.py
from typing import List, Optional, Set, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi import Path as FPath
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rxdesk.api.deps import get_db, current_doctor
from rxdesk.db.base import MAX_ID
from rxdesk.models import Doctor, MiscItem
from rxdesk.schemas.common import MessageOut
from rxdesk.schemas.misc import (MiscIn, MiscOut, MiscBulkIn, MiscBulkOut,
                                 MiscBulkRowError, MiscType)

router = APIRouter()


def _existing_keys(db: Session) -> Set[Tuple[str, str]]:
    rows = db.execute(select(MiscItem.type, MiscItem.name)).all()
    return {(t, n.lower()) for t, n in rows}


@router.get("/", response_model=List[MiscOut])
def list_misc(
        type: Optional[MiscType] = Query(None),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    qry = db.query(MiscItem)
    if type:
        qry = qry.filter(MiscItem.type == type)
    return qry.order_by(MiscItem.type.asc(), MiscItem.name.asc()).all()


@router.post("/", response_model=MiscOut, status_code=201)
def create_misc(
        payload: MiscIn,
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")
    if (payload.type, name.lower()) in _existing_keys(db):
        raise HTTPException(status_code=400, detail="Item already exists")

    item = MiscItem(name=name, type=payload.type)
    db.add(item)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Item already exists")
    db.refresh(item)
    return item


@router.post("/bulk", response_model=MiscBulkOut, status_code=201)
def bulk_create_misc(
        payload: MiscBulkIn,
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    """
    Insert many vocabulary rows at once.
    Blank names and (type, name) pairs that already exist (in the DB or
    earlier in the same batch) are skipped and reported by row number.
    """
    seen = _existing_keys(db)
    skipped: List[MiscBulkRowError] = []
    inserted = 0

    for row, it in enumerate(payload.items, start=1):
        name = it.name.strip()
        if not name:
            skipped.append(
                MiscBulkRowError(row=row, name=it.name, reason="blank name"))
            continue
        key = (it.type, name.lower())
        if key in seen:
            skipped.append(
                MiscBulkRowError(row=row, name=name, reason="duplicate"))
            continue
        seen.add(key)
        db.add(MiscItem(name=name, type=it.type))
        inserted += 1

    db.commit()
    return MiscBulkOut(inserted=inserted, skipped=skipped)


@router.delete("/{item_id}", response_model=MessageOut)
def delete_misc(
        item_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    item = db.get(MiscItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    db.delete(item)
    db.commit()
    return {"message": "Item deleted successfully"}
