"""
Execution Tools: validated, shell-free execution of read-only cloud CLI commands.

Tools:
- validate_command: raise CommandValidationError unless a command is safe
- is_safe_command: boolean form of validate_command
- CommandExecutor: validate-then-run with timeout and stdout cap
"""

from .command_executor import CommandExecutor
from .command_validator import is_safe_command, validate_command

__all__ = [
    "CommandExecutor",
    "is_safe_command",
    "validate_command",
]
