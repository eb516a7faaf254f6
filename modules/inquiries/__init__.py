"""
Inquiries module.

Career applications and investor inquiries from the public website,
listed for staff.
"""

from .models import CareerApplication, InvestorInquiry, Position, InvestmentRange

__all__ = [
    "CareerApplication",
    "InvestorInquiry",
    "Position",
    "InvestmentRange",
]
