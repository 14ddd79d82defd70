"""ETAS (M, t) process module with unit-aware configuration.

This module provides configuration, runtime structures and exact samplers
for the marked Hawkes process with Omori-Utsu triggering and truncated
Gutenberg-Richter magnitudes.
"""

from .config import ETASConfig, ETASConfigOutput
from .runtime import ETASRuntime
from .kernel import (
    REFERENCE_TIME,
    ProcessParameters,
    b_value_to_beta,
    check_process_parameters,
    critical_rate,
    excitation_factor,
    draw_magnitude,
    next_background_occurrence,
    tail_integral,
    descendant_survival_probability,
    next_descendant_occurrence,
    get_branching_ratio,
    get_stationary_rate,
)
from .scheduler import DescendantStream, Event, EventSchedule

__all__ = [
    'ETASConfig',
    'ETASConfigOutput',
    'ETASRuntime',
    'REFERENCE_TIME',
    'ProcessParameters',
    'b_value_to_beta',
    'check_process_parameters',
    'critical_rate',
    'excitation_factor',
    'draw_magnitude',
    'next_background_occurrence',
    'tail_integral',
    'descendant_survival_probability',
    'next_descendant_occurrence',
    'get_branching_ratio',
    'get_stationary_rate',
    'DescendantStream',
    'Event',
    'EventSchedule',
]
