"""
Job Request - customer intake and the priced submission payload.

The payload is what gets handed to the CRM integration; delivering it is
the caller's concern.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..engine.models import QuoteBreakdown, QuoteRequest

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def get_phone_digits(value: str) -> str:
    """Only the numeric digits of a phone number."""
    return re.sub(r'\D', '', value or '')


def format_phone_number(value: str) -> str:
    """Format as (000)000-0000, progressively while typing."""
    digits = get_phone_digits(value)[:10]
    if not digits:
        return ''
    if len(digits) <= 3:
        return f"({digits}"
    if len(digits) <= 6:
        return f"({digits[:3]}){digits[3:]}"
    return f"({digits[:3]}){digits[3:6]}-{digits[6:]}"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ''))


@dataclass
class TechnicianInfo:
    """The technician submitting jobs."""
    company_name: str
    first_name: str
    last_name: str
    phone: str
    email: str
    company_id: Optional[str] = None

    def validate(self) -> list[str]:
        """Return a list of problems; empty when valid."""
        errors = []
        if not all([self.company_name, self.first_name, self.last_name, self.phone, self.email]):
            errors.append("Please fill in all fields.")
        if self.email and not is_valid_email(self.email):
            errors.append("Please enter a valid email address.")
        if self.phone and len(get_phone_digits(self.phone)) != 10:
            errors.append("Please enter a valid 10-digit phone number.")
        return errors

    def normalized(self) -> 'TechnicianInfo':
        """Copy with capitalized names, formatted phone and lower-case email."""
        return TechnicianInfo(
            company_name=self.company_name.strip(),
            first_name=self.first_name.strip()[:1].upper() + self.first_name.strip()[1:],
            last_name=self.last_name.strip()[:1].upper() + self.last_name.strip()[1:],
            phone=format_phone_number(self.phone),
            email=self.email.strip().lower(),
            company_id=self.company_id,
        )


@dataclass
class JobRequest:
    """Customer details collected on the job request form."""
    customer_name: str
    phone: str
    email: str
    address: str
    job_description: str
    preferred_date: Optional[str] = None

    def validate(self) -> list[str]:
        errors = []
        required = [self.customer_name, self.phone, self.email, self.address, self.job_description]
        if not all(field and field.strip() for field in required):
            errors.append("Please fill in all required fields.")
        if self.email and not is_valid_email(self.email):
            errors.append("Please enter a valid email address.")
        if self.phone and len(get_phone_digits(self.phone)) < 10:
            errors.append("Please enter a valid phone number (at least 10 digits).")
        return errors


def _payload_phone(value: str) -> str:
    """Format a plain 10-digit number; anything longer is sent as entered."""
    if len(get_phone_digits(value)) == 10:
        return format_phone_number(value)
    return value.strip()


def build_job_payload(
    job: JobRequest,
    request: QuoteRequest,
    breakdown: QuoteBreakdown,
    technician: Optional[TechnicianInfo] = None,
    config_version: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
) -> dict:
    """
    Build the record sent to the CRM.

    Raises ValueError when the job details are invalid.
    """
    errors = job.validate()
    if errors:
        raise ValueError("; ".join(errors))

    submitted_at = submitted_at or datetime.now(timezone.utc)
    payload = {
        "customerName": job.customer_name.strip(),
        "phone": _payload_phone(job.phone),
        "email": job.email.strip().lower(),
        "address": job.address.strip(),
        "jobDescription": job.job_description.strip(),
        "preferredDate": job.preferred_date or "Not specified",
        "submittedAt": submitted_at.isoformat(),
        "squareFootage": request.square_footage,
        "additionalHvacSystems": request.additional_hvac_systems,
        "zipcode": request.zipcode,
        "quote": breakdown.to_payload_dict(),
        "configVersion": config_version,
    }
    if technician is not None:
        tech = technician.normalized()
        payload["technician"] = {
            "companyName": tech.company_name,
            "companyId": tech.company_id,
            "firstName": tech.first_name,
            "lastName": tech.last_name,
            "phone": tech.phone,
            "email": tech.email,
        }
    return payload
