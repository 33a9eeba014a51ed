"""
Custom exceptions for the gramviz.io module.

Purpose
- Provide IO-layer specific error types for dataset and annotation loading.
- Keep gramviz.core.errors as the source of truth for summarization errors.

Boundaries
- gramviz.core.errors.InvalidFieldError is raised by column checks in both layers.
- gramviz.io raises Data* errors for filesystem and parsing concerns:
  - ConfigError: invalid explicit configuration file.
  - DatasetNotFoundError: requested table file does not exist.
  - UnsupportedFormatError: file suffix is not a readable table format.
  - AnnotationError: GFF3 input is malformed or has no usable features.
"""

from __future__ import annotations


class DataError(Exception):
    """
    Base class for IO-related errors in gramviz.io.

    Notes:
        Use this as a catch-all for IO-layer failures, distinct from gramviz.core errors.
    """


class ConfigError(DataError):
    """Raised when an explicitly requested configuration file cannot be parsed."""


class DatasetNotFoundError(DataError):
    """Raised when a dataset path does not exist."""


class UnsupportedFormatError(DataError):
    """
    Raised when a dataset path has an unsupported suffix.

    Examples:
        - data.xlsx (only .csv, .tsv and .parquet are read)
    """


class AnnotationError(DataError):
    """
    Raised when genome annotation cannot be parsed.

    Notes:
        Includes GFF3 rows with too few columns, non-integer coordinates, or a
        file with no features of the requested type.
    """
