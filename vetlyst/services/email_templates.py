"""
Vetlyst Backend — Email Templates
===================================

What:  HTML bodies for the three notification emails.
How:   Plain f-string templates with inline styles (email clients ignore most
       <style> blocks). Every user-supplied value goes through `_e()`
       (html.escape) before interpolation.
"""

from datetime import date
from html import escape
from typing import Optional

from vetlyst.models.submission import AppointmentRequest, ClinicClaim

TIME_SLOTS = {
    "morning": "Morning (8AM - 12PM)",
    "afternoon": "Afternoon (12PM - 5PM)",
    "evening": "Evening (5PM - 8PM)",
}

NOT_SPECIFIED = "Not specified"


def _e(value: Optional[str]) -> str:
    return escape(value or "")


def format_preferred_date(value: Optional[str]) -> str:
    """'2024-03-18' → 'Monday, March 18, 2024'; unparseable text is shown as sent."""
    if not value:
        return NOT_SPECIFIED
    try:
        parsed = date.fromisoformat(value.strip()[:10])
    except ValueError:
        return value
    return f"{parsed.strftime('%A, %B')} {parsed.day}, {parsed.year}"


def format_preferred_time(value: Optional[str]) -> str:
    if not value:
        return NOT_SPECIFIED
    return TIME_SLOTS.get(value.strip().lower(), value)


def _row(label: str, value: str) -> str:
    return (
        f'<p style="margin: 8px 0;"><strong style="color: #4b5563;">{label}:</strong> '
        f'<span style="color: #1f2937;">{value}</span></p>'
    )


def _section(title: str, body: str, accent: str = "#667eea") -> str:
    return (
        f'<div style="margin: 20px 0; padding: 20px; background: #f9fafb; '
        f'border-radius: 8px; border-left: 4px solid {accent};">'
        f'<h2 style="margin-top: 0; font-size: 18px; color: {accent};">{title}</h2>'
        f"{body}</div>"
    )


def _wrap(heading: str, content: str, footer: str) -> str:
    return f"""<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"><meta name="viewport" content="width=device-width, initial-scale=1.0"></head>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
      <div style="background: #0F3A5C; color: white; padding: 24px; border-radius: 8px 8px 0 0; text-align: center;">
        <h1 style="margin: 0; font-size: 22px;">{heading}</h1>
      </div>
      <div style="background: #ffffff; padding: 24px; border: 1px solid #e5e7eb; border-top: none;">
        {content}
      </div>
      <div style="text-align: center; padding: 16px; color: #6b7280; font-size: 13px;">
        {footer}
      </div>
    </div>
  </body>
</html>"""


# ══════════════════════════════════════════════════════════════════════════
# Appointment Request → Clinic
# ══════════════════════════════════════════════════════════════════════════

def appointment_subject(request: AppointmentRequest) -> str:
    return f"New Appointment Request from {request.pet_owner_name}"


def appointment_clinic_html(request: AppointmentRequest, support_email: str) -> str:
    owner = _e(request.pet_owner_name)
    email = _e(request.pet_owner_email)
    phone = _e(request.pet_owner_phone)

    owner_rows = (
        _row("Name", owner)
        + _row("Email", f'<a href="mailto:{email}">{email}</a>')
        + _row("Phone", f'<a href="tel:{phone}">{phone}</a>')
    )

    detail_rows = ""
    if request.pet_name:
        detail_rows += _row("Pet Name", _e(request.pet_name))
    if request.pet_type:
        detail_rows += _row("Pet Type", _e(request.pet_type.capitalize()))
    detail_rows += _row("Preferred Date", _e(format_preferred_date(request.preferred_date)))
    detail_rows += _row("Preferred Time", _e(format_preferred_time(request.preferred_time)))

    message_box = ""
    if request.message:
        message_box = (
            '<div style="background: #fef3c7; border-left: 4px solid #f59e0b; padding: 15px; '
            'margin: 20px 0; border-radius: 4px;"><strong>Additional Information:</strong><br>'
            f"{_e(request.message)}</div>"
        )

    content = (
        f"<p>Hi {_e(request.clinic_name) or 'there'} team,</p>"
        "<p>You have received a new appointment request through your Vetlyst listing!</p>"
        + _section("Pet Owner Information", owner_rows)
        + _section("Appointment Details", detail_rows)
        + message_box
        + '<p style="margin-top: 30px;"><strong>Next Steps:</strong><br>'
        f"Please contact {owner} as soon as possible to confirm the appointment. "
        f"You can reply directly to this email or call them at {phone}.</p>"
    )
    footer = (
        "<p>This appointment request was sent through <strong>Vetlyst</strong></p>"
        f"<p>Questions? Contact us at {_e(support_email)}</p>"
    )
    return _wrap("New Appointment Request", content, footer)


# ══════════════════════════════════════════════════════════════════════════
# Clinic Claim → Admin, Claimant
# ══════════════════════════════════════════════════════════════════════════

def claim_admin_subject(claim: ClinicClaim) -> str:
    return f"New Clinic Claim Request: {claim.clinic_name}"


def claim_admin_html(claim: ClinicClaim) -> str:
    clinic_rows = _row("Clinic Name", _e(claim.clinic_name)) + _row(
        "Clinic ID", _e(claim.clinic_place_id)
    )
    claimant_rows = (
        _row("Name", _e(claim.claimant_name))
        + _row("Email", _e(claim.claimant_email))
        + _row("Phone", _e(claim.claimant_phone) or "Not provided")
        + _row("Role", _e(claim.claimant_role))
    )
    verification_rows = _row("Preferred Method", _e(claim.verification_method))
    if claim.verification_notes:
        verification_rows += _row("Additional Notes", _e(claim.verification_notes))

    submitted = claim.created_at.strftime("%Y-%m-%d %H:%M UTC") if claim.created_at else ""
    content = (
        _section("Clinic Information", clinic_rows, accent="#2563eb")
        + _section("Claimant Information", claimant_rows, accent="#2563eb")
        + _section("Verification Details", verification_rows, accent="#2563eb")
    )
    footer = f"<p>Claim ID: {claim.id}<br>Submitted: {submitted}</p>"
    return _wrap("New Clinic Claim Request", content, footer)


def claim_confirmation_subject(claim: ClinicClaim) -> str:
    return f"Claim Request Received for {claim.clinic_name}"


def claim_confirmation_html(claim: ClinicClaim) -> str:
    clinic = _e(claim.clinic_name)
    contact = _e(claim.claimant_email)
    if claim.claimant_phone:
        contact += f" or {_e(claim.claimant_phone)}"

    next_steps = (
        "<ul>"
        "<li>Our team will review your claim within 1-2 business days</li>"
        f"<li>We may contact you at {contact} for verification</li>"
        "<li>Once approved, you'll receive login credentials to manage your clinic profile</li>"
        "</ul>"
    )
    detail_rows = (
        _row("Clinic", clinic)
        + _row("Your Role", _e(claim.claimant_role))
        + _row("Verification Method", _e(claim.verification_method))
    )
    content = (
        f"<p>Hi {_e(claim.claimant_name)},</p>"
        f"<p>We've received your request to claim <strong>{clinic}</strong> on Vetlyst.</p>"
        + _section("What Happens Next?", next_steps, accent="#2563eb")
        + _section("Your Claim Details", detail_rows, accent="#2563eb")
        + "<p>If you have any questions, please reply to this email.</p>"
        + "<p>Best regards,<br><strong>The Vetlyst Team</strong></p>"
    )
    footer = f"<p>Reference ID: {claim.id}</p>"
    return _wrap("Thank You for Your Claim Request!", content, footer)
