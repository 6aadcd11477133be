from timex.models.batch import Batch  # noqa: F401
from timex.models.classroom import Classroom, RoomType  # noqa: F401
from timex.models.faculty import Faculty  # noqa: F401
from timex.models.subject import Subject, SubjectType  # noqa: F401
from timex.models.timetable_entry import DayOfWeek, TimetableEntry  # noqa: F401
