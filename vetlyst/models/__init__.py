# Models package init; importing it registers every table with Base.metadata
from vetlyst.models.clinic import Clinic
from vetlyst.models.submission import AppointmentRequest, ClinicClaim, STATUS_PENDING

__all__ = ["Clinic", "AppointmentRequest", "ClinicClaim", "STATUS_PENDING"]
