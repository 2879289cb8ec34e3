"""
Domain Exceptions

Every failure the housing core reports to its immediate caller. The
boundary layer is responsible for turning these into user-facing text;
none of them is fatal to the process and none is retried automatically.
"""


class HousingError(Exception):
    """Base exception for all domain-level errors"""


class InvalidStateTransition(HousingError):
    """Raised when a status precondition of a transition is not met"""

    def __init__(self, subject: str, current: object, action: str):
        self.subject = subject
        self.current = current
        self.action = action
        state = getattr(current, 'value', current) or 'NONE'
        super().__init__(f"Cannot {action} {subject}: current status is {state}")


class InventoryExhausted(HousingError):
    """Raised when a room type has no available unit left to reserve"""

    def __init__(self, project_name: str, room_type: object):
        self.project_name = project_name
        self.room_type = room_type
        super().__init__(
            f"No {getattr(room_type, 'value', room_type)} units left in project '{project_name}'"
        )


class InventoryOverflow(HousingError):
    """Raised when releasing a unit would exceed the room type's total"""

    def __init__(self, project_name: str, room_type: object):
        self.project_name = project_name
        self.room_type = room_type
        super().__init__(
            f"All {getattr(room_type, 'value', room_type)} units of project "
            f"'{project_name}' are already available"
        )


class NoSlotAvailable(HousingError):
    """Raised when a project has no officer slot left"""

    def __init__(self, project_name: str):
        self.project_name = project_name
        super().__init__(f"Project '{project_name}' has no officer slot available")


class NotAuthorized(HousingError):
    """Raised when an officer or manager acts on a project they do not handle"""


class NotFound(HousingError):
    """Raised for an unknown applicant, officer, manager, project or room type"""

    def __init__(self, kind: str, key: object):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{getattr(key, 'value', key)}' not found")


class ReceiptUnavailable(HousingError):
    """Raised when a receipt is requested for an applicant that has not booked"""


class NotEligible(HousingError):
    """Raised when an applicant's age and marital status exclude a room type"""


class ScheduleConflict(HousingError):
    """Raised when two project application periods that must not overlap do"""


class RoleConflict(HousingError):
    """Raised when an officer's applicant role and officer role collide"""


class AlreadyExists(HousingError):
    """Raised when registering a key that is already taken"""

    def __init__(self, kind: str, key: object):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' already exists")
