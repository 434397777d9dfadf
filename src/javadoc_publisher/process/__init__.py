"""
Javadoc Publisher Process Module.

Provides bounded-timeout execution of external commands.
"""

__all__ = ["ProcessExecutor", "ProcessResult"]

from javadoc_publisher.process.executor import ProcessExecutor, ProcessResult
