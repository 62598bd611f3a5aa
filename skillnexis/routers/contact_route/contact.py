# routers/contact.py
import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from skillnexis.deps import get_mail_client
from skillnexis.schemas.contact_schema import ContactIn
from skillnexis.services import contact_service

router = APIRouter(prefix="/api", tags=["contact"])

@router.post("/contact")
async def contact(payload: ContactIn, client: httpx.AsyncClient = Depends(get_mail_client)):
    status_code, body = await contact_service.send_contact_email(client, payload.model_dump())
    return JSONResponse(status_code=status_code, content=body)
