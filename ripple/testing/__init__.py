from .scenario import ReactorScenario, Result

__all__ = [
    "ReactorScenario",
    "Result",
]
