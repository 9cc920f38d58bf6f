"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_PUBLIC_BASE_URL = "http://localhost:5000"
MIN_PASSWORD_LENGTH = 6

MAX_TITLE_LENGTH = 255
MAX_COURSE_CODE_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 2000
MAX_STUDENT_NAME_LENGTH = 255
MAX_STUDENT_EMAIL_LENGTH = 255
MAX_STUDENT_ID_LENGTH = 100

STATUS_ON_TIME = "On Time"
