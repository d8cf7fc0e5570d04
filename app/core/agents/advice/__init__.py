"""
Study advice agent modules.
"""
from .advice_generator import StudyAdvisor

__all__ = [
    "StudyAdvisor",
]
