from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....core.dependencies import get_contact_mailer
from ....domain.errors import DeliveryError
from ....infrastructure.mail.contact_mailer import ContactMailer, ContactMessage
from ...api.schemas.contact import ContactRequest

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post("")
def submit_contact(
    payload: ContactRequest,
    mailer: ContactMailer = Depends(get_contact_mailer),
) -> Dict[str, Any]:
    contact = ContactMessage(
        name=payload.name.strip(),
        email=str(payload.email),
        message=payload.message.strip(),
        company=payload.company,
    )
    if not mailer.send_contact_message(contact):
        raise DeliveryError()
    return {"success": True, "message": "Your message has been sent successfully!"}
