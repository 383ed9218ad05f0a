"""
CreateActivation inputs.

Company details captured when a customer code is issued.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CompanyProfile:
    """Company record bound to an activation code."""

    company_name: str
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
