"""
Client profile API endpoints (manage:clients)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from storefront.core.auth import TokenUser, require_permission
from storefront.core.database import get_db
from storefront.domain.user import Client, ClientCreate, ClientUpdate
from storefront.services.client_service import ClientService

router = APIRouter()

manage_clients = require_permission("manage:clients")


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    return ClientService(db)


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
def create_client(
    data: ClientCreate,
    _: TokenUser = Depends(manage_clients),
    service: ClientService = Depends(get_client_service),
):
    return Client.model_validate(service.create(data))


@router.get("", response_model=List[Client])
def list_clients(
    full_name: Optional[str] = Query(None, description="Search by full name"),
    status_filter: Optional[bool] = Query(None, alias="status", description="Filter by active flag"),
    _: TokenUser = Depends(manage_clients),
    service: ClientService = Depends(get_client_service),
):
    return [Client.model_validate(c) for c in service.find_all(full_name=full_name, status=status_filter)]


@router.get("/{client_id}", response_model=Client)
def get_client(
    client_id: int,
    _: TokenUser = Depends(manage_clients),
    service: ClientService = Depends(get_client_service),
):
    return Client.model_validate(service.find_one(client_id))


@router.patch("/{client_id}", response_model=Client)
def update_client(
    client_id: int,
    data: ClientUpdate,
    _: TokenUser = Depends(manage_clients),
    service: ClientService = Depends(get_client_service),
):
    return Client.model_validate(service.update(client_id, data))


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: int,
    _: TokenUser = Depends(manage_clients),
    service: ClientService = Depends(get_client_service),
):
    service.remove(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
