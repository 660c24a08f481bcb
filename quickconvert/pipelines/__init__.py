"""
Local conversion pipelines for quickconvert.

Each pipeline serves one row of the conversion matrix; PipelineFactory runs
them and shapes their errors into failures.
"""

from .factory import PipelineFactory

__all__ = ['PipelineFactory']
