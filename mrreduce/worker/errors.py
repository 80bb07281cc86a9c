"""
Errors raised by a reduce task.

Every failure aborts the whole task. The exception says which stage of the
pipeline failed, on which file, and why; the original exception is chained
as __cause__. Retrying is up to whoever scheduled the task.
"""

from enum import Enum


class TaskStage(Enum):
    """Stage of the reduce pipeline."""
    ACQUIRE = "acquire"              # Opening an intermediate file
    DECODE = "decode"                # Parsing records from an intermediate file
    REDUCE = "reduce"                # Calling the user reduce function
    CREATE_OUTPUT = "create_output"  # Creating the output file
    ENCODE = "encode"                # Writing records to the output file


class ReduceTaskError(Exception):
    """Base class for reduce task failures."""

    stage = None

    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        stage = self.stage.value if self.stage is not None else "reduce task"
        super().__init__(f"{stage} failed for {path}: {cause}")


class InputUnavailable(ReduceTaskError):
    """A required intermediate file could not be opened."""
    stage = TaskStage.ACQUIRE


class DecodeError(ReduceTaskError):
    """An intermediate file is not a valid record stream."""
    stage = TaskStage.DECODE


class ReduceFunctionError(ReduceTaskError):
    """The reduce function raised or returned something other than a string."""
    stage = TaskStage.REDUCE


class OutputCreateError(ReduceTaskError):
    """The output file could not be created."""
    stage = TaskStage.CREATE_OUTPUT


class EncodeError(ReduceTaskError):
    """A record could not be written to the output file."""
    stage = TaskStage.ENCODE
