"""
Invoice dashboard endpoints.

Paths are relative to the protected prefix the router is mounted under.
Mutations accept regular form posts. Successful create/update answer with
303 See Other to the listing; failures answer with the handler's `State`.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse

from . import actions, service
from .schemas import State

router = APIRouter()


def _state_response(state: State) -> JSONResponse:
    if state.ok:
        code = status.HTTP_200_OK
    elif state.errors:
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=code, content=state.model_dump())


@router.get("")
async def overview() -> dict:
    return {"cards": await service.card_data()}


@router.get("/invoices")
async def list_invoices(
    query: str = Query(default="", max_length=200),
    page: int = Query(default=1, ge=1),
) -> dict:
    return await service.list_invoices(query=query, page=page)


@router.get("/invoices/create")
async def create_invoice_form() -> dict:
    return await service.create_form()


@router.post("/invoices")
async def create_invoice(request: Request) -> JSONResponse:
    form = await request.form()
    state = await actions.create_invoice(form)
    return _state_response(state)


@router.get("/invoices/{invoice_id}/edit")
async def edit_invoice_form(invoice_id: str) -> dict:
    return await service.edit_form(invoice_id)


@router.post("/invoices/{invoice_id}")
async def update_invoice(invoice_id: str, request: Request) -> JSONResponse:
    form = await request.form()
    state = await actions.update_invoice(invoice_id, form)
    return _state_response(state)


@router.post("/invoices/{invoice_id}/delete")
async def delete_invoice(invoice_id: str) -> JSONResponse:
    state = await actions.delete_invoice(invoice_id)
    return _state_response(state)
