"""Command-line interface modules for fishbio pipeline execution.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from fishbio.cli.run_summary import run_summary_pipeline, main

__all__ = ['run_summary_pipeline', 'main']
