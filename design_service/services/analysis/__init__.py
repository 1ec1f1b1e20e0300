"""
Analysis services - requirement classification, complexity and strategy.
"""

from design_service.services.analysis.complexity_estimator import (
    ComplexityEstimator,
    ComplexityEstimationError,
    estimate_by_rules,
)

from design_service.services.analysis.requirement_classifier import (
    classify,
    detect_ui_areas,
)

from design_service.services.analysis.smart_strategy import (
    SmartStrategyEngine,
    implementation_steps,
)

__all__ = [
    'ComplexityEstimator',
    'ComplexityEstimationError',
    'estimate_by_rules',
    'classify',
    'detect_ui_areas',
    'SmartStrategyEngine',
    'implementation_steps',
]
