"""
masstimber Report Generator Module

This module provides HTML calculation report generation
for sized mass-timber structures.
"""

from .report_generator import ReportGenerator, generate_report

__all__ = ['ReportGenerator', 'generate_report']
