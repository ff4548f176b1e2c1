"""Client router - FastAPI endpoints for client operations"""

import logging

from fastapi import APIRouter, Depends
from google.cloud.firestore import Client

from ...auth import get_current_identity
from ...database import get_db
from ..settings.schemas import Identity
from .schemas import (
    ClientCreate,
    ClientNote,
    ClientRecord,
    ClientUpdate,
    ContactRequest,
    CreatedResponse,
    NoteCreate,
)
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])


def get_client_service(db: Client = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=list[ClientRecord])
async def get_clients(
    identity: Identity = Depends(get_current_identity),
    service: ClientService = Depends(get_client_service),
):
    """Get all clients visible to the current user, newest first"""
    return service.get_clients(identity.uid)


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    identity: Identity = Depends(get_current_identity),
    service: ClientService = Depends(get_client_service),
):
    """Create a new client"""
    return CreatedResponse(id=service.create_client(data, identity.uid))


@router.get("/{client_id}", response_model=ClientRecord)
async def get_client(
    client_id: str,
    identity: Identity = Depends(get_current_identity),
    service: ClientService = Depends(get_client_service),
):
    return service.get_client(client_id, identity.uid)


@router.put("/{client_id}", response_model=ClientRecord)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    identity: Identity = Depends(get_current_identity),
    service: ClientService = Depends(get_client_service),
):
    """Replace a client's details"""
    return service.update_client(client_id, data, identity.uid)


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    identity: Identity = Depends(get_current_identity),
    service: ClientService = Depends(get_client_service),
):
    """Delete a client and its notes"""
    service.delete_client(client_id, identity.uid)
    return {"message": "Client deleted"}


@router.post("/{client_id}/contact", status_code=202)
async def contact_client(
    client_id: str,
    data: ContactRequest,
    identity: Identity = Depends(get_current_identity),
    service: ClientService = Depends(get_client_service),
):
    """Queue an email to the client"""
    service.contact_client(client_id, data, identity)
    return {"message": "Your email has been queued for sending."}


# ============================================================================
# NOTES
# ============================================================================


@router.get("/{client_id}/notes", response_model=list[ClientNote])
async def get_notes(
    client_id: str,
    identity: Identity = Depends(get_current_identity),
    service: ClientService = Depends(get_client_service),
):
    """Get a client's notes, newest first"""
    return service.get_notes(client_id, identity.uid)


@router.post("/{client_id}/notes", response_model=CreatedResponse, status_code=201)
async def add_note(
    client_id: str,
    data: NoteCreate,
    identity: Identity = Depends(get_current_identity),
    service: ClientService = Depends(get_client_service),
):
    return CreatedResponse(id=service.add_note(client_id, data.text, identity.uid))


@router.delete("/{client_id}/notes/{note_id}")
async def delete_note(
    client_id: str,
    note_id: str,
    identity: Identity = Depends(get_current_identity),
    service: ClientService = Depends(get_client_service),
):
    service.delete_note(client_id, note_id, identity.uid)
    return {"message": "Note deleted"}
