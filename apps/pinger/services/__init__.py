from .exceptions import (
    AlreadyRunning,
    AlreadyStopped,
    DuplicateTarget,
    InvalidTarget,
    NetworkFailure,
    PingerError,
    ReloadFailed,
    TargetConfigError,
    TargetNotFound,
)
from .log_buffer import LogBuffer
from .scheduler import PingLoop, PingScheduler, ServiceState
from .targets import Target, load_targets, load_targets_or_empty

__all__ = [
    'AlreadyRunning',
    'AlreadyStopped',
    'DuplicateTarget',
    'InvalidTarget',
    'NetworkFailure',
    'PingerError',
    'ReloadFailed',
    'TargetConfigError',
    'TargetNotFound',
    'LogBuffer',
    'PingLoop',
    'PingScheduler',
    'ServiceState',
    'Target',
    'load_targets',
    'load_targets_or_empty',
]
