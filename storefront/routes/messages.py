import csv
import io
import logging
import re
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.db.connection import get_db
from storefront.db.models import AdminUserOrm, MessageOrm
from storefront.dependencies.auth import get_current_admin
from storefront.models.schemas import (
    MessageCreateSchema, MessageCreatedResponse, MessageReadUpdateSchema, MessageResponseSchema
)
from storefront.services.mailer import forward_message
from storefront.services.site_settings import load_site_config

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/messages", tags=["Messages"])

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CSV_HEADER = ["name", "email", "message", "createdAt", "country", "orderNo"]


def messages_to_csv(messages: List[MessageOrm]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for m in messages:
        writer.writerow([
            m.name or "",
            m.email or "",
            m.message or "",
            m.created_at.isoformat() if m.created_at else "",
            m.country or "",
            m.order_no or "",
        ])
    return buffer.getvalue()


def _get_message_or_404(db: Session, message_id: str) -> MessageOrm:
    message = db.query(MessageOrm).filter(MessageOrm.id == message_id).one_or_none()
    if not message:
        raise HTTPException(404, "Message not found")
    return message


@router.post("", response_model=MessageCreatedResponse, status_code=201)
def create_message(
    payload: MessageCreateSchema,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    name = (payload.name or "").strip()
    email = (payload.email or "").strip()
    body = (payload.message or "").strip()
    if not name or not email or not body:
        raise HTTPException(400, "Name, email, and message are required")
    if not EMAIL_RE.match(email):
        raise HTTPException(400, "Please provide a valid email address")

    message = MessageOrm(
        name=name,
        email=email,
        subject=(payload.subject or "").strip(),
        country=(payload.country or "").strip(),
        order_no=(payload.order_no or "").strip(),
        message=body,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info(f"Message {message.id} received from {email}.")

    site = load_site_config(db)
    if site.forwarding_enabled and site.forward_email and (settings.RESEND_API_KEY or "").strip():
        background_tasks.add_task(
            forward_message,
            site.forward_email,
            message.name,
            message.email,
            message.message,
            subject=message.subject,
            country=message.country,
            order_no=message.order_no,
            created_at=message.created_at,
        )
        logger.debug(f"Message {message.id} queued for forwarding to {site.forward_email}.")

    return MessageCreatedResponse(message="Message sent successfully", id=message.id)


@router.get("", response_model=List[MessageResponseSchema])
def list_messages(
    format: str = Query("json", description="'json' or 'csv'"),
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    messages = db.query(MessageOrm).order_by(MessageOrm.created_at.desc()).all()
    if format.lower() == "csv":
        return Response(
            content=messages_to_csv(messages),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": 'attachment; filename="messages.csv"'},
        )
    return messages


@router.get("/{message_id}", response_model=MessageResponseSchema)
def get_message(
    message_id: str,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return _get_message_or_404(db, message_id)


@router.put("/{message_id}", response_model=MessageResponseSchema)
def mark_message(
    message_id: str,
    payload: MessageReadUpdateSchema,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    message = _get_message_or_404(db, message_id)
    message.read = payload.read
    db.commit()
    db.refresh(message)
    return message


@router.delete("/{message_id}")
def delete_message(
    message_id: str,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    message = _get_message_or_404(db, message_id)
    db.delete(message)
    db.commit()
    logger.info(f"Message {message_id} deleted by '{admin.username}'.")
    return {"success": True}
