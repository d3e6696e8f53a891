# Routers package
from . import staff_router
from . import presence_router
from . import patients_router
from . import appointments_router

__all__ = [
    "staff_router",
    "presence_router",
    "patients_router",
    "appointments_router",
]
