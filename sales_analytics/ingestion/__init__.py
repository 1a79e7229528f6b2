"""
Data Ingestion Module
"""
from .loaders import FileFormat, FrameLoader, load_dataset_from_directory, reports_to_frame

__all__ = [
    "FileFormat",
    "FrameLoader",
    "load_dataset_from_directory",
    "reports_to_frame",
]
