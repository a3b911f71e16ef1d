"""/values routes: typed get/set plus defaults/read/write actions."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from linecfg import Registry, ValueKind
from linecfg.store import get_registry

router = APIRouter()


class ValueUpdate(BaseModel):
    value: Any


def _registry(request: Request) -> Registry:
    return request.app.state.registry or get_registry()


def _check_type(kind: ValueKind, value: Any) -> None:
    if kind is ValueKind.STR:
        ok = isinstance(value, str)
    elif kind is ValueKind.INT:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    if not ok:
        raise HTTPException(
            status_code=422,
            detail=f"value {value!r} is not a valid {kind.value}",
        )


def _payload(reg: Registry, kind: ValueKind, id: int) -> dict:
    desc = reg.schema.lookup(kind, id)
    if desc is None:
        raise HTTPException(
            status_code=404, detail=f"no {kind.value} value with id {id}"
        )
    return {
        "kind": kind.value,
        "id": id,
        "name": desc.name,
        "value": reg.get(kind, id),
    }


@router.get("/schema")
def schema(request: Request):  # noqa: D401
    return _registry(request).schema.to_dict()


@router.get("/values")
def values(request: Request):  # noqa: D401
    return _registry(request).snapshot()


@router.get("/values/{kind}/{id}")
def get_value(kind: ValueKind, id: int, request: Request):  # noqa: D401
    return _payload(_registry(request), kind, id)


@router.put("/values/{kind}/{id}")
def put_value(
    kind: ValueKind, id: int, body: ValueUpdate, request: Request
):  # noqa: D401
    reg = _registry(request)
    if reg.schema.lookup(kind, id) is None:
        raise HTTPException(
            status_code=404, detail=f"no {kind.value} value with id {id}"
        )
    _check_type(kind, body.value)
    reg.set(kind, id, body.value)
    return _payload(reg, kind, id)


@router.post("/defaults")
def defaults(request: Request):  # noqa: D401
    _registry(request).default()
    return {"ok": True}


@router.post("/read")
def read(request: Request):  # noqa: D401
    return {"ok": _registry(request).read()}


@router.post("/write")
def write(request: Request):  # noqa: D401
    return {"ok": _registry(request).write()}
