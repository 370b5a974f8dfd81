from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from ssas.reference_data import REFERENCE_DATA

router = APIRouter(prefix="/api/reference", tags=["reference"])


@router.get("")
def list_reference_data() -> dict[str, list[dict[str, str]]]:
    return {name: [asdict(item) for item in items] for name, items in REFERENCE_DATA.items()}


@router.get("/{name}")
def get_reference_list(name: str) -> list[dict[str, str]]:
    items = REFERENCE_DATA.get(name)
    if items is None:
        raise HTTPException(status_code=404, detail="Reference list not found")
    return [asdict(item) for item in items]
