"""Statically typed effect types: Option, Either, Validation, Task and TaskEither."""

# ruff: noqa: F401

from monadic.either import Either, Left, Right, left, right
from monadic.errors import EmptyErrorsError
from monadic.option import Nothing, Option, Some, nothing, some
from monadic.task import Task, task
from monadic.task_either import TaskEither, task_either, task_left
from monadic.validation import Invalid, Valid, Validation, invalid, valid
