"""wppack pipeline steps and the fixed pipeline definition.

Usage::

    from wppack.steps import default_pipeline

    for step in default_pipeline():
        print(step.step_id, step.required, step.has_fallback)

The order of ``STEP_CLASSES`` *is* the pipeline order and must not change:
later steps rely on the outputs of earlier ones.
"""

from __future__ import annotations

from wppack.steps.base import BaseStep, StepError, StepSkipped
from wppack.steps.s0_dependencies import DependenciesStep, DependencyError
from wppack.steps.s1_clean import CleanStep
from wppack.steps.s2_task_runner import TaskRunnerBuildStep
from wppack.steps.s3_reconcile import ReconcileFilesStep
from wppack.steps.s4_translations import TranslationTemplateStep
from wppack.steps.s5_production_archive import ProductionArchiveStep
from wppack.steps.s6_development_archive import DevelopmentArchiveStep
from wppack.steps.s7_validation import ValidationStep

# ---------------------------------------------------------------------------
# Pipeline definition: ordered step classes
# ---------------------------------------------------------------------------

STEP_CLASSES: tuple[type[BaseStep], ...] = (
    DependenciesStep,
    CleanStep,
    TaskRunnerBuildStep,
    ReconcileFilesStep,
    TranslationTemplateStep,
    ProductionArchiveStep,
    DevelopmentArchiveStep,
    ValidationStep,
)

STEP_ORDER: list[str] = [cls().step_id for cls in STEP_CLASSES]


def default_pipeline() -> list[BaseStep]:
    """Instantiate the fixed pipeline, in execution order."""
    return [cls() for cls in STEP_CLASSES]


__all__ = [
    # Base
    "BaseStep",
    "StepError",
    "StepSkipped",
    "DependencyError",
    # Pipeline
    "STEP_CLASSES",
    "STEP_ORDER",
    "default_pipeline",
    # Concrete steps
    "DependenciesStep",
    "CleanStep",
    "TaskRunnerBuildStep",
    "ReconcileFilesStep",
    "TranslationTemplateStep",
    "ProductionArchiveStep",
    "DevelopmentArchiveStep",
    "ValidationStep",
]
