"""Project control: POC per project, undercoverage per period."""

from profithub_modules.projects.models import PocCalculation, UndercoverageCalculation
from profithub_modules.projects.service import ProjectControlService

__all__ = ["PocCalculation", "ProjectControlService", "UndercoverageCalculation"]
