from models.booking import Batch, Booking, BookingStatus
from models.rejection import AdmissionResult, Rejection, RejectionCode, RejectionKind
from models.schedule import ScheduleDay, WeekSchedule
from models.seat_map import Availability, BufferQuota, SeatCell, SeatMapView, SeatStatus
from models.squad import Employee, Roster, Squad
