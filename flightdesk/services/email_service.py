import logging
import smtplib
import uuid
from datetime import datetime, timezone
from email.message import EmailMessage

import requests
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from flightdesk.core.config import Settings, settings as default_settings
from flightdesk.core.errors import NotificationError
from flightdesk.db.session import Storage
from flightdesk.models.booking import Booking
from flightdesk.models.email_log import EmailLog
from flightdesk.models.flight import Flight

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Flight Booking Confirmation"


def render_confirmation(passenger_name: str, origin: str, destination: str, price) -> str:
    return (
        f"Hello {passenger_name},\n\n"
        f"Your flight from {origin} to {destination} is confirmed.\n"
        f"Total Price: ${float(price):.2f}\n\n"
        "Have a safe trip!"
    )


def notify_booking(db: Session, booking: Booking, flight: Flight, cfg: Settings | None = None) -> str | None:
    """Best-effort confirmation for a committed booking.

    Returns the email log id, or None when even the log could not be written.
    Never raises: the booking is already committed whatever happens here.
    """
    cfg = cfg or default_settings
    body = render_confirmation(booking.passenger_name, flight.origin, flight.destination, flight.price)
    try:
        return queue_email(db, booking.email, CONFIRMATION_SUBJECT, body, related_booking_id=booking.id, cfg=cfg)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("could not record confirmation for booking %s", booking.id)
        return None


def queue_email(db: Session, to_email: str, subject: str, body: str, related_booking_id: int | None = None,
                cfg: Settings | None = None) -> str:
    """Record and attempt immediate send. Body is stored so the worker can retry on failure."""
    cfg = cfg or default_settings
    eid = str(uuid.uuid4())
    log = EmailLog(
        id=eid,
        to_email=to_email,
        subject=subject,
        body=body,
        status="queued",
        related_booking_id=related_booking_id,
    )
    db.add(log)
    db.commit()

    if not cfg.mail_enabled:
        log.status = "skipped"
        db.commit()
        logger.debug("mail not configured; skipping %r to %s", subject, to_email)
        return eid

    try:
        send_email(to_email, subject, body, cfg=cfg)
        log.status = "sent"
        log.sent_at = datetime.now(timezone.utc)
        logger.info("sent %r to %s", subject, to_email)
    except NotificationError as e:
        log.status = "failed"
        log.last_error = str(e)[:500]
        logger.warning("email to %s failed, left for retry: %s", to_email, e)
    db.commit()
    return eid


def send_email(to_email: str, subject: str, body: str, cfg: Settings | None = None):
    """Send email via SendGrid if configured, otherwise SMTP (MailHog recommended for local)."""
    cfg = cfg or default_settings
    try:
        if cfg.SENDGRID_API_KEY:
            _send_via_sendgrid(to_email, subject, body, cfg)
            return
        _send_via_smtp(to_email, subject, body, cfg)
    except (OSError, ValueError, smtplib.SMTPException, requests.RequestException) as e:
        raise NotificationError(f"{type(e).__name__}: {e}") from e


def _send_via_smtp(to_email: str, subject: str, body: str, cfg: Settings):
    msg = EmailMessage()
    msg["From"] = cfg.SMTP_FROM
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)

    with smtplib.SMTP(cfg.SMTP_HOST, cfg.SMTP_PORT, timeout=cfg.MAIL_TIMEOUT_SECONDS) as smtp:
        if cfg.SMTP_STARTTLS:
            smtp.starttls()
        if cfg.SMTP_USERNAME:
            smtp.login(cfg.SMTP_USERNAME, cfg.SMTP_PASSWORD)
        smtp.send_message(msg)


def _send_via_sendgrid(to_email: str, subject: str, body: str, cfg: Settings):
    from_email = cfg.SENDGRID_FROM_EMAIL or cfg.SMTP_FROM
    payload = {
        "personalizations": [{"to": [{"email": to_email}]}],
        "from": {"email": from_email},
        "subject": subject,
        "content": [{"type": "text/plain", "value": body}],
    }
    r = requests.post(
        "https://api.sendgrid.com/v3/mail/send",
        json=payload,
        headers={"Authorization": f"Bearer {cfg.SENDGRID_API_KEY}"},
        timeout=cfg.MAIL_TIMEOUT_SECONDS,
    )
    if r.status_code >= 400:
        raise NotificationError(f"SendGrid error {r.status_code}: {r.text}")


def dispatch_booking_confirmation(storage: Storage, booking_id: int, cfg: Settings | None = None) -> None:
    """Background entrypoint: runs after the booking response, on its own session."""
    try:
        with storage.session_scope() as db:
            booking = db.get(Booking, booking_id)
            flight = db.get(Flight, booking.flight_id) if booking else None
            if not booking or not flight:
                logger.warning("booking %s or its flight vanished before confirmation", booking_id)
                return
            notify_booking(db, booking, flight, cfg=cfg)
    except Exception:
        # Runs detached from the request; nothing above this can report it.
        logger.exception("confirmation for booking %s not dispatched", booking_id)


def process_pending_emails(db: Session, limit: int = 50, cfg: Settings | None = None) -> dict:
    """Process up to `limit` queued or failed emails; retry send and update status. Returns counts."""
    cfg = cfg or default_settings
    if not cfg.mail_enabled:
        return {"processed": 0, "sent": 0, "failed": 0, "skipped": True}
    pending = (
        db.query(EmailLog)
        .filter(EmailLog.status.in_(["queued", "failed"]), EmailLog.body.isnot(None), EmailLog.body != "")
        .order_by(EmailLog.created_at.asc())
        .limit(limit)
        .all()
    )
    sent, failed = 0, 0
    for log in pending:
        try:
            send_email(log.to_email, log.subject, log.body, cfg=cfg)
            log.status = "sent"
            log.sent_at = datetime.now(timezone.utc)
            log.last_error = None
            sent += 1
        except NotificationError as e:
            log.status = "failed"
            log.last_error = str(e)[:500]
            failed += 1
    if pending:
        db.commit()
    return {"processed": len(pending), "sent": sent, "failed": failed}
