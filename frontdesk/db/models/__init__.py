# Models package (re-export feature modules for stable imports)
from .staff.profile import StaffProfile
from .clinic.patient import Patient
from .clinic.appointment import Appointment

__all__ = [
    "StaffProfile",
    "Patient",
    "Appointment",
]
