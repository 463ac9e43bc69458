class SchedulerError(Exception):
    """Base class for errors raised by the scheduling engine."""

    pass


class ConfigError(SchedulerError, ValueError):
    """Raised when a configuration file or option set is invalid."""

    pass


class SchedulerBusyError(SchedulerError):
    """Raised when a runner receives a request while a search is still in flight."""

    pass


class ScheduleExecutionError(SchedulerError):
    """Raised when the isolated search worker fails; the cause is chained, never partially recovered."""

    pass
