# services/contact_service.py
import html
import logging
import re
from typing import Any, Dict, Tuple

import httpx

from skillnexis.config import settings

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
REQUEST_TIMEOUT = 15.0


class ContactValidationError(ValueError):
    pass


def validate_contact(payload: Dict[str, Any]) -> Dict[str, str]:
    fields = {k: (payload.get(k) or "").strip() for k in ("name", "email", "subject", "message")}
    if not all(fields.values()):
        raise ContactValidationError("All fields are required")
    if not EMAIL_RE.match(fields["email"]):
        raise ContactValidationError("Invalid email format")
    return fields


def build_email(contact: Dict[str, str]) -> Dict[str, Any]:
    name = html.escape(contact["name"])
    email = html.escape(contact["email"])
    subject = html.escape(contact["subject"])
    message = html.escape(contact["message"]).replace("\n", "<br>")
    html_content = (
        "<div style=\"font-family: 'Segoe UI', Tahoma, sans-serif; max-width: 600px; margin: 0 auto;\">"
        "<h1>New Contact Form Submission</h1><p>SkillNexis Website</p>"
        "<h2>Contact Details</h2>"
        f"<p><strong>Name:</strong> {name}</p>"
        f"<p><strong>Email:</strong> <a href=\"mailto:{email}\">{email}</a></p>"
        f"<p><strong>Subject:</strong> {subject}</p>"
        f"<h3>Message:</h3><div>{message}</div>"
        "<p>This email was sent from the SkillNexis contact form.<br>"
        f"Reply directly to this email to respond to <strong>{name}</strong> at <strong>{email}</strong></p>"
        "</div>"
    )
    text_content = (
        "New Contact Form Submission - SkillNexis\n\n"
        "Contact Details:\n"
        f"Name: {contact['name']}\n"
        f"Email: {contact['email']}\n"
        f"Subject: {contact['subject']}\n\n"
        "Message:\n"
        f"{contact['message']}\n\n"
        "---\n"
        "This email was sent from the SkillNexis contact form.\n"
        f"Reply directly to this email to respond to {contact['name']} at {contact['email']}\n"
    )
    return {
        "sender": {"name": settings.FROM_NAME, "email": settings.FROM_EMAIL},
        "to": [{"email": settings.CONTACT_EMAIL, "name": "SkillNexis Team"}],
        "replyTo": {"email": contact["email"], "name": contact["name"]},
        "subject": f"Contact Form: {contact['subject']}",
        "htmlContent": html_content,
        "textContent": text_content,
    }


async def send_contact_email(client: httpx.AsyncClient, payload: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
    """
    Relay a contact form submission to the transactional email API.

    Returns (status_code, body) ready for the HTTP response.
    """
    try:
        contact = validate_contact(payload)
    except ContactValidationError as e:
        return 400, {"error": str(e)}

    try:
        response = await client.post(
            settings.BREVO_API_URL,
            json=build_email(contact),
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "api-key": settings.BREVO_API_KEY,
            },
            timeout=REQUEST_TIMEOUT,
        )
        if response.is_error:
            logger.error(f"Email API error {response.status_code}: {response.text}")
            return 500, {"error": "Failed to send email. Please try again later."}
        result = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Error sending email: {str(e)}")
        return 500, {"error": "Internal server error. Please try again later."}

    logger.info(f"Contact email relayed, messageId={result.get('messageId')}")
    return 200, {"message": "Email sent successfully", "messageId": result.get("messageId")}
